"""famtree - family tree core for a consumer genealogy application.

Members, typed relationships and subfamilies stored as one versioned
document per owner, with integrity validation, role-based sharing and
family join codes.
"""

__version__ = "0.1.0"

# Lazy imports to avoid circular dependencies
def __getattr__(name: str):
    if name == "models":
        from famtree import models
        return models
    if name == "validation":
        from famtree import validation
        return validation
    if name == "store":
        from famtree import store
        return store
    if name == "trees":
        from famtree import trees
        return trees
    if name == "sharing":
        from famtree import sharing
        return sharing
    if name == "codes":
        from famtree import codes
        return codes
    if name == "dna":
        from famtree import dna
        return dna
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
