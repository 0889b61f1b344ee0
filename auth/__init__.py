"""
auth — User accounts and authentication.

Provides:
  • Session token creation & verification (HMAC-signed)
  • Password hashing (bcrypt)
  • One-time tokens for email verification and password reset
  • Register / Login / Verify / Reset API routes
  • ``get_current_user`` FastAPI dependency (the Auth Gate)
"""
