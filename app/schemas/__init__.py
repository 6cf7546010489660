"""
Schemas module - Request/Response schemas for API endpoints.

All schemas live in app.schemas.schemas:
- Request schemas (what API accepts, blank required text rejected)
- Response schemas (what API returns)
"""
