"""
FastAPI routers grouped by resource (account, store, like, notify, etc.).

Each module exposes an APIRouter that app.py includes. Handlers stay thin:
authenticate, call a service, wrap the result with routers.deps.ok().
"""
