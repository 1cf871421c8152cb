"""Domain layer for ledgerpilot.

The engine modules (extractor, synthesizer, balances, schedules,
consolidation) are pure functions over the entities in
``ledgerpilot.domain.entities``. The service modules (entity, account,
journal, schedule_definitions) wrap them around a Database.
"""
