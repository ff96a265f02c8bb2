"""Domain layer - Pure business logic.

Entities, value objects, validators, protocols (ports) and error types
for the authentication and session security subsystem. No framework or
infrastructure imports.

Structure:
- entities/: UserAccount, Session, RateLimitCounter, AuditLogEntry
- value_objects/: RateLimitRule, RateLimitDecision
- validators/: Email format and password complexity rules
- protocols/: Repository and service ports
- errors/: Domain error dataclasses
"""
