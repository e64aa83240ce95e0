"""Infrastructure layer - External collaborators.

This layer contains the adapters the policy engine talks to:
- External REST rule-check service (httpx)
- Wordlist and shared-history membership services
- Directory-native password policy testing
"""
