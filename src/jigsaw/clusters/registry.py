"""Cluster registry — the single owner of the piece → cluster mapping.

One registry per puzzle.  It is also the reference "pieces layer": every
cluster transform maps into the registry's coordinate space.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Mapping

from .models import Cluster, Piece


log = logging.getLogger(__name__)


@dataclass
class ConnectionEvent:
    """A merge between two different clusters."""

    source: Cluster         # discarded
    target: Cluster         # before absorbing source
    merged: Cluster         # the survivor (same object as target)
    moved_pieces: list[Piece]


@dataclass
class CompletionEvent:
    """Fired once when every piece belongs to a single cluster."""

    final_cluster: Cluster
    total_pieces: int


ConnectionListener = Callable[[ConnectionEvent], None]
CompletionListener = Callable[[CompletionEvent], None]


def rebuild_pivot_from_bounds(cluster: Cluster) -> None:
    """Recentre *cluster*'s pivot on its member bounds (no visual change)."""
    cluster.rebuild_pivot_from_bounds()


class ClusterRegistry:
    """Creates, merges and looks up clusters for one puzzle."""

    def __init__(self) -> None:
        self._clusters: dict[int, Cluster] = {}
        self._cluster_by_piece: dict[str, Cluster] = {}
        self._pieces: list[Piece] = []
        self._next_id = 1
        self._completed = False
        self.on_connected: list[ConnectionListener] = []
        self.on_completed: list[CompletionListener] = []

    # ── queries ────────────────────────────────────────────────────

    @property
    def clusters(self) -> list[Cluster]:
        """Live clusters in creation order."""
        return list(self._clusters.values())

    @property
    def pieces(self) -> list[Piece]:
        return list(self._pieces)

    @property
    def cluster_count(self) -> int:
        return len(self._clusters)

    @property
    def total_pieces(self) -> int:
        return len(self._pieces)

    @property
    def is_complete(self) -> bool:
        return self._completed

    def cluster_of(self, piece: Piece) -> Cluster | None:
        return self._cluster_by_piece.get(piece.id)

    def get(self, cluster_id: int) -> Cluster | None:
        return self._clusters.get(cluster_id)

    def piece_origin_in_layer(self, piece: Piece) -> tuple[float, float] | None:
        """Core origin of *piece* in pieces-layer space."""
        cluster = self.cluster_of(piece)
        if cluster is None:
            return None
        return cluster.piece_origin_in_parent(piece)

    # ── lifecycle ──────────────────────────────────────────────────

    def clear(self) -> None:
        self._clusters.clear()
        self._cluster_by_piece.clear()
        self._pieces.clear()
        self._completed = False

    def reset_completion(self) -> None:
        self._completed = False

    def _new_cluster(self) -> Cluster:
        cluster = Cluster(id=self._next_id)
        self._next_id += 1
        self._clusters[cluster.id] = cluster
        return cluster

    def create_initial_clusters(
        self,
        pieces: Iterable[Piece],
        positions: Mapping[str, tuple[float, float]] | None = None,
    ) -> list[Cluster]:
        """Wrap every piece in its own cluster.

        The piece sits at local (0, 0); the cluster is placed so the
        piece's core origin lands on ``positions[piece.id]`` in layer
        space (default (0, 0)).  Any previous state is discarded.
        """
        self.clear()
        positions = positions or {}
        created: list[Cluster] = []

        for piece in pieces:
            if piece.id in self._cluster_by_piece:
                raise ValueError(f"Duplicate piece id '{piece.id}'")
            cluster = self._new_cluster()
            piece.x, piece.y = 0.0, 0.0
            cluster.pieces.append(piece)
            cluster.transform.position.set(*positions.get(piece.id, (0.0, 0.0)))
            cluster.rebuild_pivot_from_bounds()

            self._cluster_by_piece[piece.id] = cluster
            self._pieces.append(piece)
            created.append(cluster)

        self._completed = self.cluster_count == 1 and self.total_pieces > 0
        log.info("Created %d initial clusters", len(created))
        return created

    # ── merging ────────────────────────────────────────────────────

    def merge_clusters(self, a: Cluster, b: Cluster) -> Cluster:
        """Union two clusters; the larger survives (ties keep *a*).

        Pieces keep their pieces-layer position.  The survivor's pivot is
        rebuilt from its new bounds and the other cluster is discarded.
        """
        if a is b:
            return a
        target, source = (b, a) if b.size > a.size else (a, b)
        return self._absorb(target, source, rebuild_pivot=True)

    def align_and_merge(
        self,
        source: Cluster,
        target: Cluster,
        source_anchor: tuple[float, float] | None = None,
        target_anchor: tuple[float, float] | None = None,
        *,
        rebuild_pivot: bool = True,
    ) -> Cluster:
        """Translate *source* so its anchor meets *target*'s, then merge into *target*.

        Anchors are pieces-layer points; without both, no translation
        happens.  Unlike :meth:`merge_clusters` the target always survives.
        """
        if source is target:
            return target
        if source_anchor is not None and target_anchor is not None:
            dx = target_anchor[0] - source_anchor[0]
            dy = target_anchor[1] - source_anchor[1]
            source.position.set(source.position.x + dx, source.position.y + dy)
        return self._absorb(target, source, rebuild_pivot=rebuild_pivot)

    def _absorb(self, target: Cluster, source: Cluster, *, rebuild_pivot: bool) -> Cluster:
        if self._clusters.get(source.id) is not source or self._clusters.get(target.id) is not target:
            raise ValueError(
                f"Cannot merge clusters {source.id} → {target.id}: not owned by this registry")
        if source.rotation_q != target.rotation_q:
            log.debug("Merging cluster %d (q=%d) into %d (q=%d) with mismatched rotation",
                      source.id, source.rotation_q, target.id, target.rotation_q)

        moved = list(source.pieces)
        for piece in moved:
            wx, wy = source.transform.to_parent(piece.x, piece.y)
            piece.x, piece.y = target.transform.to_local(wx, wy)
            target.pieces.append(piece)
            self._cluster_by_piece[piece.id] = target

        source.pieces.clear()
        del self._clusters[source.id]

        if rebuild_pivot:
            target.rebuild_pivot_from_bounds()

        log.info("Merged cluster %d into %d (%d pieces, %d clusters left)",
                 source.id, target.id, target.size, self.cluster_count)

        event = ConnectionEvent(source=source, target=target, merged=target, moved_pieces=moved)
        for listener in list(self.on_connected):
            listener(event)

        if not self._completed and self.cluster_count == 1 and self.total_pieces > 0:
            self._completed = True
            log.info("Puzzle complete: %d pieces in cluster %d", self.total_pieces, target.id)
            done = CompletionEvent(final_cluster=target, total_pieces=self.total_pieces)
            for listener in list(self.on_completed):
                listener(done)

        return target
