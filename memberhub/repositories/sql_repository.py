"""High-level data access helpers backed by SQLAlchemy."""
from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError

from memberhub.core.utils import utcnow
from memberhub.db.models import (
    Influencer,
    Like,
    Membership,
    Notice,
    Notification,
    Store,
    Subscription,
    User,
    UserSetting,
    VerificationCode,
)
from memberhub.db.session import get_session
from memberhub.domain import targets


class SQLRepository:
    """CRUD helpers wrapping the SQLAlchemy session."""

    # -------------------------- generic --------------------------
    def _create(self, entity):
        with get_session() as session:
            session.add(entity)
            session.commit()
            session.refresh(entity)
            return entity

    def _update(self, model, entity_id: int, values: dict):
        with get_session() as session:
            entity = session.get(model, entity_id)
            if not entity:
                return None
            for key, value in values.items():
                setattr(entity, key, value)
            session.commit()
            session.refresh(entity)
            return entity

    def _toggle(self, model, user_id: int, target_type: str, target_id: int):
        """Create the (user, target) row when absent, delete it when present.

        Returns (entity, created). entity is None after a revoke.
        """
        keys = {"user_id": user_id, "target_type": target_type, "target_id": target_id}
        with get_session() as session:
            existing = session.execute(select(model).filter_by(**keys)).scalar_one_or_none()
            if existing:
                session.delete(existing)
                session.commit()
                return None, False
            entity = model(created_at=utcnow(), **keys)
            session.add(entity)
            try:
                session.commit()
            except IntegrityError:
                session.rollback()
                # a concurrent request inserted the same pair first
                winner = session.execute(select(model).filter_by(**keys)).scalar_one_or_none()
                if winner is None:
                    raise
                return winner, True
            session.refresh(entity)
            return entity, True

    def _delete_edges(self, session, target_type: str, target_ids: Iterable[int]) -> None:
        ids = list(target_ids)
        if not ids:
            return
        session.execute(delete(Like).where(Like.target_type == target_type, Like.target_id.in_(ids)))
        session.execute(
            delete(Subscription).where(Subscription.target_type == target_type, Subscription.target_id.in_(ids))
        )

    def _delete_memberships(self, session, membership_ids: list[int]) -> None:
        if not membership_ids:
            return
        self._delete_edges(session, targets.MEMBERSHIP, membership_ids)
        session.execute(delete(Notification).where(Notification.membership_id.in_(membership_ids)))
        session.execute(delete(Membership).where(Membership.id.in_(membership_ids)))

    # -------------------------- users --------------------------
    def get_user(self, user_id: int) -> Optional[User]:
        with get_session() as session:
            return session.get(User, user_id)

    def get_user_by_email(self, email: str) -> Optional[User]:
        with get_session() as session:
            stmt = select(User).where(User.email == email)
            return session.execute(stmt).scalar_one_or_none()

    def create_user(
        self,
        email: str,
        name: str,
        *,
        role: str = targets.ROLE_USER,
        referral_code: str | None = None,
        is_verified: bool = True,
    ) -> User:
        now = utcnow()
        return self._create(
            User(
                email=email,
                name=name,
                role=role,
                referral_code=referral_code,
                is_verified=is_verified,
                disabled=False,
                created_at=now,
                updated_at=now,
            )
        )

    def set_refresh_token_id(self, user_id: int, token_id: str | None) -> None:
        with get_session() as session:
            stmt = update(User).where(User.id == user_id).values(refresh_token_id=token_id, updated_at=utcnow())
            session.execute(stmt)
            session.commit()

    def set_user_disabled(self, user_id: int, disabled: bool = True) -> None:
        with get_session() as session:
            values = {"disabled": disabled, "updated_at": utcnow()}
            if disabled:
                values["refresh_token_id"] = None
            session.execute(update(User).where(User.id == user_id).values(**values))
            session.commit()

    def set_user_role(self, user_id: int, role: str) -> None:
        with get_session() as session:
            session.execute(update(User).where(User.id == user_id).values(role=role, updated_at=utcnow()))
            session.commit()

    def delete_user(self, user_id: int) -> None:
        """Remove a user together with everything the user owns."""
        with get_session() as session:
            user = session.get(User, user_id)
            if not user:
                return
            store_ids = session.execute(select(Store.id).where(Store.user_id == user_id)).scalars().all()
            influencer_ids = (
                session.execute(select(Influencer.id).where(Influencer.user_id == user_id)).scalars().all()
            )
            membership_ids = (
                session.execute(
                    select(Membership.id).where(
                        Membership.store_id.in_(store_ids) | Membership.influencer_id.in_(influencer_ids)
                    )
                )
                .scalars()
                .all()
            )
            self._delete_memberships(session, list(membership_ids))
            self._delete_edges(session, targets.STORE, store_ids)
            self._delete_edges(session, targets.INFLUENCER, influencer_ids)
            session.execute(delete(Store).where(Store.user_id == user_id))
            session.execute(delete(Influencer).where(Influencer.user_id == user_id))
            session.execute(delete(Like).where(Like.user_id == user_id))
            session.execute(delete(Subscription).where(Subscription.user_id == user_id))
            session.execute(delete(Notification).where(Notification.user_id == user_id))
            session.execute(delete(UserSetting).where(UserSetting.user_id == user_id))
            session.execute(update(Notice).where(Notice.user_id == user_id).values(user_id=None))
            session.execute(delete(VerificationCode).where(VerificationCode.email == user.email))
            session.delete(user)
            session.commit()

    # -------------------------- verification codes --------------------------
    def replace_verification_code(self, email: str, code_hash: str, expires_at: datetime) -> VerificationCode:
        """Store a new code for email, dropping any previous one in the same transaction."""
        with get_session() as session:
            session.execute(delete(VerificationCode).where(VerificationCode.email == email))
            entity = VerificationCode(
                email=email,
                code_hash=code_hash,
                attempts=0,
                expires_at=expires_at,
                created_at=utcnow(),
            )
            session.add(entity)
            session.commit()
            session.refresh(entity)
            return entity

    def get_verification_code(self, email: str) -> Optional[VerificationCode]:
        with get_session() as session:
            return session.get(VerificationCode, email)

    def increment_code_attempts(self, email: str) -> int:
        with get_session() as session:
            entity = session.get(VerificationCode, email)
            if not entity:
                return 0
            entity.attempts = int(entity.attempts or 0) + 1
            session.commit()
            return entity.attempts

    def delete_verification_code(self, email: str) -> None:
        with get_session() as session:
            session.execute(delete(VerificationCode).where(VerificationCode.email == email))
            session.commit()

    def purge_expired_codes(self, now: datetime) -> int:
        with get_session() as session:
            result = session.execute(delete(VerificationCode).where(VerificationCode.expires_at < now))
            session.commit()
            return result.rowcount or 0

    # -------------------------- settings --------------------------
    def get_user_setting(self, user_id: int) -> Optional[UserSetting]:
        with get_session() as session:
            return session.get(UserSetting, user_id)

    def upsert_user_setting(self, user_id: int, **values) -> UserSetting:
        with get_session() as session:
            setting = session.get(UserSetting, user_id)
            if not setting:
                setting = UserSetting(user_id=user_id, bio_auth="OFF", notify="ON", updated_at=utcnow())
                session.add(setting)
            for key, value in values.items():
                setattr(setting, key, value)
            setting.updated_at = utcnow()
            session.commit()
            session.refresh(setting)
            return setting

    # -------------------------- stores --------------------------
    def create_store(self, user_id: int, **fields) -> Store:
        now = utcnow()
        return self._create(Store(user_id=user_id, enabled=False, created_at=now, updated_at=now, **fields))

    def get_store(self, store_id: int) -> Optional[Store]:
        with get_session() as session:
            return session.get(Store, store_id)

    def get_store_by_owner(self, user_id: int) -> Optional[Store]:
        with get_session() as session:
            return session.execute(select(Store).where(Store.user_id == user_id)).scalar_one_or_none()

    def list_stores(self) -> list[Store]:
        with get_session() as session:
            return session.execute(select(Store).order_by(Store.id)).scalars().all()

    def list_enabled_stores_with_coordinates(self) -> list[Store]:
        with get_session() as session:
            stmt = (
                select(Store)
                .where(Store.enabled.is_(True), Store.lat.is_not(None), Store.lng.is_not(None))
                .order_by(Store.id)
            )
            return session.execute(stmt).scalars().all()

    def update_store(self, store_id: int, **fields) -> Optional[Store]:
        fields["updated_at"] = utcnow()
        return self._update(Store, store_id, fields)

    def toggle_store_enabled(self, store_id: int) -> Optional[Store]:
        with get_session() as session:
            store = session.get(Store, store_id)
            if not store:
                return None
            store.enabled = not store.enabled
            store.updated_at = utcnow()
            session.commit()
            session.refresh(store)
            return store

    def delete_store(self, store_id: int) -> bool:
        with get_session() as session:
            store = session.get(Store, store_id)
            if not store:
                return False
            membership_ids = (
                session.execute(select(Membership.id).where(Membership.store_id == store_id)).scalars().all()
            )
            self._delete_memberships(session, list(membership_ids))
            self._delete_edges(session, targets.STORE, [store_id])
            session.delete(store)
            session.commit()
            return True

    # -------------------------- influencers --------------------------
    def create_influencer(self, user_id: int, **fields) -> Influencer:
        now = utcnow()
        return self._create(Influencer(user_id=user_id, enabled=False, created_at=now, updated_at=now, **fields))

    def get_influencer(self, influencer_id: int) -> Optional[Influencer]:
        with get_session() as session:
            return session.get(Influencer, influencer_id)

    def get_influencer_by_owner(self, user_id: int) -> Optional[Influencer]:
        with get_session() as session:
            stmt = select(Influencer).where(Influencer.user_id == user_id)
            return session.execute(stmt).scalar_one_or_none()

    def list_influencers(self) -> list[Influencer]:
        with get_session() as session:
            return session.execute(select(Influencer).order_by(Influencer.id)).scalars().all()

    def update_influencer(self, influencer_id: int, **fields) -> Optional[Influencer]:
        fields["updated_at"] = utcnow()
        return self._update(Influencer, influencer_id, fields)

    def toggle_influencer_enabled(self, influencer_id: int) -> Optional[Influencer]:
        with get_session() as session:
            influencer = session.get(Influencer, influencer_id)
            if not influencer:
                return None
            influencer.enabled = not influencer.enabled
            influencer.updated_at = utcnow()
            session.commit()
            session.refresh(influencer)
            return influencer

    def delete_influencer(self, influencer_id: int) -> bool:
        with get_session() as session:
            influencer = session.get(Influencer, influencer_id)
            if not influencer:
                return False
            membership_ids = (
                session.execute(select(Membership.id).where(Membership.influencer_id == influencer_id))
                .scalars()
                .all()
            )
            self._delete_memberships(session, list(membership_ids))
            self._delete_edges(session, targets.INFLUENCER, [influencer_id])
            session.delete(influencer)
            session.commit()
            return True

    # -------------------------- memberships --------------------------
    def create_membership(self, **fields) -> Membership:
        fields.setdefault("created_at", utcnow())
        return self._create(Membership(**fields))

    def get_membership(self, membership_id: int) -> Optional[Membership]:
        with get_session() as session:
            return session.get(Membership, membership_id)

    def list_memberships(self) -> list[Membership]:
        with get_session() as session:
            return session.execute(select(Membership).order_by(Membership.id)).scalars().all()

    def list_memberships_since(
        self,
        since: datetime,
        *,
        store_ids: Iterable[int] = (),
        influencer_ids: Iterable[int] = (),
    ) -> list[Membership]:
        store_ids = list(store_ids)
        influencer_ids = list(influencer_ids)
        if not store_ids and not influencer_ids:
            return []
        with get_session() as session:
            stmt = (
                select(Membership)
                .where(
                    Membership.created_at >= since,
                    Membership.store_id.in_(store_ids) | Membership.influencer_id.in_(influencer_ids),
                )
                .order_by(Membership.id)
            )
            return session.execute(stmt).scalars().all()

    def update_membership(self, membership_id: int, **fields) -> Optional[Membership]:
        return self._update(Membership, membership_id, fields)

    def delete_membership(self, membership_id: int) -> bool:
        with get_session() as session:
            if not session.get(Membership, membership_id):
                return False
            self._delete_memberships(session, [membership_id])
            session.commit()
            return True

    # -------------------------- notices --------------------------
    def create_notice(self, **fields) -> Notice:
        fields.setdefault("created_at", utcnow())
        return self._create(Notice(**fields))

    def get_notice(self, notice_id: int) -> Optional[Notice]:
        with get_session() as session:
            return session.get(Notice, notice_id)

    def list_notices(self, status: str | None = None) -> list[Notice]:
        with get_session() as session:
            stmt = select(Notice).order_by(Notice.id)
            if status:
                stmt = stmt.where(Notice.status == status)
            return session.execute(stmt).scalars().all()

    def list_notices_since(self, since: datetime, status: str = "PUBLIC") -> list[Notice]:
        with get_session() as session:
            stmt = (
                select(Notice)
                .where(Notice.status == status, Notice.created_at >= since)
                .order_by(Notice.id)
            )
            return session.execute(stmt).scalars().all()

    def update_notice(self, notice_id: int, **fields) -> Optional[Notice]:
        return self._update(Notice, notice_id, fields)

    def delete_notice(self, notice_id: int) -> bool:
        with get_session() as session:
            notice = session.get(Notice, notice_id)
            if not notice:
                return False
            self._delete_edges(session, targets.NOTICE, [notice_id])
            session.execute(delete(Notification).where(Notification.notice_id == notice_id))
            session.delete(notice)
            session.commit()
            return True

    # -------------------------- likes / subscriptions --------------------------
    def toggle_like(self, user_id: int, target_type: str, target_id: int) -> tuple[Optional[Like], bool]:
        return self._toggle(Like, user_id, target_type, target_id)

    def list_likes(self, user_id: int, target_type: str) -> list[Like]:
        with get_session() as session:
            stmt = (
                select(Like)
                .where(Like.user_id == user_id, Like.target_type == target_type)
                .order_by(Like.id)
            )
            return session.execute(stmt).scalars().all()

    def toggle_subscription(
        self, user_id: int, target_type: str, target_id: int
    ) -> tuple[Optional[Subscription], bool]:
        return self._toggle(Subscription, user_id, target_type, target_id)

    def list_subscriptions(self, user_id: int, target_type: str | None = None) -> list[Subscription]:
        with get_session() as session:
            stmt = select(Subscription).where(Subscription.user_id == user_id).order_by(Subscription.id)
            if target_type:
                stmt = stmt.where(Subscription.target_type == target_type)
            return session.execute(stmt).scalars().all()

    def active_subscription_target_ids(self, user_id: int, target_type: str) -> list[int]:
        """Ids of subscribed targets that are currently enabled."""
        model = Store if target_type == targets.STORE else Influencer
        with get_session() as session:
            stmt = (
                select(model.id)
                .join(Subscription, Subscription.target_id == model.id)
                .where(
                    Subscription.user_id == user_id,
                    Subscription.target_type == target_type,
                    model.enabled.is_(True),
                )
                .order_by(model.id)
            )
            return list(session.execute(stmt).scalars().all())

    # -------------------------- notifications --------------------------
    def create_notifications(self, rows: list[dict]) -> list[Notification]:
        """Insert rows, skipping any (user, notice) or (user, membership) pair that already exists."""
        if not rows:
            return []
        now = utcnow()
        with get_session() as session:
            entities = [Notification(is_read=False, created_at=now, **row) for row in rows]
            session.add_all(entities)
            try:
                session.commit()
            except IntegrityError:
                session.rollback()
                # another request materialized some of these; insert one at a time
                entities = []
                for row in rows:
                    entity = Notification(is_read=False, created_at=now, **row)
                    session.add(entity)
                    try:
                        session.commit()
                    except IntegrityError:
                        session.rollback()
                        continue
                    entities.append(entity)
            for entity in entities:
                session.refresh(entity)
            return entities

    def notified_ids(self, user_id: int, column: str) -> set[int]:
        """Notice or membership ids the user already has a notification for."""
        attr = getattr(Notification, column)
        with get_session() as session:
            stmt = select(attr).where(Notification.user_id == user_id, attr.is_not(None))
            return set(session.execute(stmt).scalars().all())

    def list_notifications(self, user_id: int) -> list[Notification]:
        with get_session() as session:
            stmt = (
                select(Notification)
                .where(Notification.user_id == user_id)
                .order_by(Notification.created_at.desc(), Notification.id.desc())
            )
            return session.execute(stmt).scalars().all()

    def mark_notification_read(self, user_id: int, notification_id: int) -> Optional[Notification]:
        with get_session() as session:
            entity = session.get(Notification, notification_id)
            if not entity or entity.user_id != user_id:
                return None
            entity.is_read = True
            session.commit()
            session.refresh(entity)
            return entity
