"""Pool registry built from market snapshots."""

from swapquote.pools.registry import SnapshotRegistry, build_registry_from_snapshot

__all__ = ["SnapshotRegistry", "build_registry_from_snapshot"]
