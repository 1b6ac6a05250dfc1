"""
API layer for Interview Coach

Contains FastAPI routers for:
- Interview session actions and state
- Feedback report
- WebSocket real-time communication
"""

from interview_coach.api.router import api_router

__all__ = ["api_router"]
