"""
Registration Service package.

Accepts new user records, enforces the minimum registration age, persists
users and lists them back. It provides:

- app.main: HTTP API surface (register, list, health, metrics).
- app.registration: Business rules applied before persistence.
- app.cache: Whole-snapshot caching proxy in front of the store.
- app.persistence: Store contract plus in-memory and PostgreSQL stores.

Layers compose as Transport -> RegistrationService -> CachedUserStore ->
UserStore, each speaking the same create/list contract below the service.
"""
