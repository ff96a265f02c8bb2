"""Application layer - Use cases and orchestration.

Structure:
- commands/: Command dataclasses and their handlers (register, verify,
  login, logout, password reset)
- services/: Policies shared by handlers (password policy, sessions,
  lockout, one-time codes, rate limiting)
- dtos/: Values handed back to the presentation layer

The application layer orchestrates domain logic; rules live in the
domain entities and value objects.
"""
