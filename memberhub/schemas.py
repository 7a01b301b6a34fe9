"""Request bodies accepted by the JSON API.

Field names follow snake_case; the mixed-case names older clients send
(verificationCode, influencer_Id, StartDate, ...) are accepted as aliases.
"""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


def _alias(*names: str) -> AliasChoices:
    return AliasChoices(*names)


class RequestModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    def values(self) -> dict:
        """Only the fields the client actually sent."""
        return self.model_dump(exclude_unset=True)


# -------------------------- account --------------------------
class CodeRequest(RequestModel):
    email: str = ""


class RegisterRequest(RequestModel):
    email: str = ""
    name: str = ""
    code: str = Field("", validation_alias=_alias("code", "verificationCode", "verification_code"))


class LoginRequest(RequestModel):
    email: str = ""
    code: str = Field("", validation_alias=_alias("code", "verificationCode", "verification_code"))


class RefreshRequest(RequestModel):
    refresh_token: str = Field("", validation_alias=_alias("refresh_token", "refreshToken"))


# -------------------------- catalog --------------------------
class StoreRequest(RequestModel):
    name: Optional[str] = None
    country: Optional[str] = None
    zip_code: Optional[str] = Field(None, validation_alias=_alias("zip_code", "zipCode"))
    address: Optional[str] = None
    address_etc: Optional[str] = Field(None, validation_alias=_alias("address_etc", "addressEtc"))
    phone: Optional[str] = None
    open_time: Optional[str] = Field(None, validation_alias=_alias("open_time", "openTime"))
    close_time: Optional[str] = Field(None, validation_alias=_alias("close_time", "closeTime"))
    open_days: Optional[str] = Field(None, validation_alias=_alias("open_days", "openDays"))
    website: Optional[str] = None
    images: Optional[str] = None
    discount_rate: Optional[str] = Field(None, validation_alias=_alias("discount_rate", "discountRate"))
    kind: Optional[str] = None
    referral_code: Optional[str] = Field(None, validation_alias=_alias("referral_code", "referralCode"))
    lat: Optional[float] = None
    lng: Optional[float] = None


class InfluencerRequest(RequestModel):
    account: Optional[str] = None
    image_url: Optional[str] = Field(None, validation_alias=_alias("image_url", "imageUrl"))
    contents: Optional[str] = None
    referral_code: Optional[str] = Field(None, validation_alias=_alias("referral_code", "referralCode"))
    website: Optional[str] = None


class MembershipRequest(RequestModel):
    subject: Optional[str] = None
    image: Optional[str] = None
    description: Optional[str] = None
    expiration_period: Optional[datetime] = Field(
        None, validation_alias=_alias("expiration_period", "expiration_Period", "expirationPeriod")
    )
    discount_rate: Optional[str] = Field(None, validation_alias=_alias("discount_rate", "discountRate"))
    price: Optional[str] = None
    issuer: Optional[str] = None


class NoticeRequest(RequestModel):
    subject: Optional[str] = None
    contents: Optional[str] = None
    status: Optional[str] = None
    start_date: Optional[datetime] = Field(None, validation_alias=_alias("start_date", "StartDate", "startDate"))
    end_date: Optional[datetime] = Field(None, validation_alias=_alias("end_date", "EndDate", "endDate"))


# -------------------------- social edges --------------------------
class LikeRequest(RequestModel):
    notice_id: Optional[int] = Field(None, validation_alias=_alias("notice_id", "notice_Id", "noticeId"))
    influencer_id: Optional[int] = Field(
        None, validation_alias=_alias("influencer_id", "influencer_Id", "influencerId")
    )
    store_id: Optional[int] = Field(None, validation_alias=_alias("store_id", "store_Id", "storeId"))
    membership_id: Optional[int] = Field(
        None, validation_alias=_alias("membership_id", "membership_Id", "membershipId")
    )

    def target_id(self, target_type: str) -> Optional[int]:
        return getattr(self, f"{target_type}_id")


class SubscriptionRequest(RequestModel):
    influencer_id: Optional[int] = Field(
        None, validation_alias=_alias("influencer_id", "influencer_Id", "influencerId")
    )
    store_id: Optional[int] = Field(None, validation_alias=_alias("store_id", "store_Id", "storeId"))

    def target_id(self, target_type: str) -> Optional[int]:
        return getattr(self, f"{target_type}_id")


# -------------------------- settings --------------------------
class _ToggleSettingRequest(RequestModel):
    enabled: Optional[bool] = None
    value: Optional[str] = None

    def is_on(self) -> bool:
        if self.enabled is not None:
            return self.enabled
        return (self.value or "").upper() == "ON"


class BioAuthRequest(_ToggleSettingRequest):
    enabled: Optional[bool] = Field(None, validation_alias=_alias("enabled", "bioAuthEnabled", "bio_auth_enabled"))
    value: Optional[str] = Field(None, validation_alias=_alias("bio_auth", "bio_Auth", "bioAuth"))


class NotifySettingRequest(_ToggleSettingRequest):
    enabled: Optional[bool] = Field(None, validation_alias=_alias("enabled", "notifyEnabled", "notify_enabled"))
    value: Optional[str] = Field(None, validation_alias=_alias("notify",))
