"""Infrastructure layer - Adapters and external integrations.

Implementations of domain protocols (ports):
- persistence/: PostgreSQL models, repositories, transient-fault retry
- rate_limit/: Redis fixed-window counter store
- security/: AES-GCM encryption, bcrypt hashing, compromised passwords
- secrets/: Environment and AWS Secrets Manager adapters
- audit/: PostgreSQL audit trail
- email/, captcha/: Outbound email and CAPTCHA verification
- logging/: structlog console adapter

The infrastructure layer depends on the domain layer (implements protocols)
but the domain layer does NOT depend on infrastructure.
"""
