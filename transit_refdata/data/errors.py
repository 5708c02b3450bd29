"""
Error taxonomy for reference data ingestion.

Fatal errors derive from RefDataError and unwind out of the importers.
Soft failures (orphan calendar exceptions) are logged where they happen
and never raised.
"""


class RefDataError(Exception):
    """Base class for every fatal ingestion error."""


# ============================================================================
# CONFIGURATION
# ============================================================================

class ConfigurationError(RefDataError):
    """Raised before any record is processed."""


class ProjectionConfigError(ConfigurationError):
    def __init__(self, source_crs: str, target_crs: str, reason: str = ""):
        self.source_crs = source_crs
        self.target_crs = target_crs
        message = f"Cannot build a converter from '{source_crs}' to '{target_crs}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class ContainerError(ConfigurationError):
    def __init__(self, path, reason: str):
        self.path = str(path)
        super().__init__(f"Cannot read '{path}': {reason}")


# ============================================================================
# DECODING
# ============================================================================

class RecordDecodeError(RefDataError):
    """A row failed required-field or type parsing."""

    def __init__(self, source: str, row: int, field: str, reason: str):
        self.source = source
        self.row = row
        self.field = field
        self.reason = reason
        super().__init__(f"{source}:{row}: field '{field}': {reason}")


# ============================================================================
# INTEGRITY
# ============================================================================

class DuplicateIdentifier(RefDataError):
    def __init__(self, identifier: str, collection: str = "collection"):
        self.identifier = identifier
        self.collection = collection
        super().__init__(f"Identifier '{identifier}' already found in {collection}")


class UnresolvedReference(RefDataError):
    def __init__(self, child_id: str, parent_kind: str = "parent", child_kind: str = "child"):
        self.child_id = child_id
        self.parent_kind = parent_kind
        self.child_kind = child_kind
        super().__init__(
            f"Failed to find the corresponding {parent_kind} for the {child_kind} '{child_id}'"
        )


class ProjectionError(RefDataError):
    def __init__(self, easting: float, northing: float, reason: str = ""):
        self.easting = easting
        self.northing = northing
        message = f"Cannot project coordinate ({easting}, {northing})"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
