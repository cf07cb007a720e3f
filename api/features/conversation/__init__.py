"""Conversation feature package: entities, store, DTOs, controller, and router.

The store keeps one append-only message history per conversation id and
persists it through SQLAlchemy. All operations for an id are serialized
through a per-id actor (see ``infra.actors``).
"""
