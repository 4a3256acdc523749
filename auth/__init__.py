"""
auth — User authentication module.

Provides:
  • Password hashing (PBKDF2-HMAC-SHA256 with per-credential salt)
  • Bearer token issuance & validation (HS256 JWT)
  • Signup / signin API routes
  • ``require_user`` FastAPI dependency (the auth gate)
"""
