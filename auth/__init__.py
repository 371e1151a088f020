"""
auth — user accounts.

Provides:
  • signed bearer token creation & verification
  • bcrypt password hashing
  • register / login / delete-account API routes
  • ``get_current_user_id`` FastAPI dependency
"""
