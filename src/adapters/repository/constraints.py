"""Messages used when a store constraint rejects a write."""

UNIQUE_CONFLICT = "El registro entra en conflicto con otro existente"
REFERENCE_CONFLICT = "El registro está relacionado con otros registros"
STATE_CONFLICT = "El registro quedaría en un estado no permitido"
MISSING_VALUE = "Faltan datos obligatorios del registro"
