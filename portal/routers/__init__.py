"""
FastAPI routers grouped by audience: server-rendered pages and the JSON API.

Each module exposes an APIRouter included by portal.app.
"""
