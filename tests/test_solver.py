"""Tests for the snap-to-solution solver.

Uses the 2×2 fixture puzzle (100×100 cells, tabbed):
  - winner / anchor selection, including deterministic tie-break
  - analytic solved pose without mutating the cluster
  - solve_and_animate end to end through the tween engine
"""

from __future__ import annotations

import asyncio
import math
import unittest

from src.jigsaw.layout import initial_layout
from src.jigsaw.snap import (
    SolveOptions,
    compute_solved_pose,
    desired_anchor_position,
    find_anchor_piece,
    find_winner_cluster,
    solve_and_animate,
)
from src.jigsaw.tween import TweenEngine
from tests.puzzle_fixture import CELL, by_key, make_pieces, make_registry


SCATTERED = {
    "p_0_0": (400.0, 120.0),
    "p_1_0": (-50.0, 60.0),
    "p_0_1": (230.0, 800.0),
    "p_1_1": (900.0, 300.0),
}


class SolverTestCase(unittest.TestCase):

    def setUp(self):
        self.pieces = make_pieces()
        self.cells = by_key(self.pieces)
        self.registry = make_registry(self.pieces, SCATTERED)

    def cluster(self, row, col):
        return self.registry.cluster_of(self.cells[(row, col)])

    def merge(self, *keys):
        cluster = self.cluster(*keys[0])
        for key in keys[1:]:
            cluster = self.registry.merge_clusters(cluster, self.cluster(*key))
        return cluster

    def assertPointsClose(self, a, b, places=6):
        self.assertAlmostEqual(a[0], b[0], places=places)
        self.assertAlmostEqual(a[1], b[1], places=places)


class TestSelection(SolverTestCase):

    def testwinner_is_largest(self):
        big = self.merge((1, 1), (1, 0))
        self.assertIs(find_winner_cluster(self.registry, self.pieces), big)

    def testtie_break_prefers_smallest_grid_key(self):
        right = self.merge((0, 1), (1, 1))
        left = self.merge((0, 0), (1, 0))
        self.assertIsNot(right, left)
        self.assertIs(find_winner_cluster(self.registry, self.pieces), left)
        self.assertIs(find_winner_cluster(self.registry, list(reversed(self.pieces))), left)

    def testsingletons_pick_origin_piece(self):
        self.assertIs(find_winner_cluster(self.registry, self.pieces), self.cluster(0, 0))

    def testno_pieces_no_winner(self):
        self.assertIsNone(find_winner_cluster(self.registry, []))

    def testanchor_prefers_origin_piece(self):
        cluster = self.merge((1, 1), (0, 0), (0, 1))
        self.assertIs(find_anchor_piece(self.registry, self.pieces, cluster), self.cells[(0, 0)])

    def testanchor_falls_back_to_smallest_key(self):
        cluster = self.merge((1, 1), (1, 0))
        self.assertIs(find_anchor_piece(self.registry, self.pieces, cluster), self.cells[(1, 0)])

    def testanchor_none_when_cluster_has_no_listed_piece(self):
        cluster = self.cluster(1, 1)
        others = [p for p in self.pieces if p is not self.cells[(1, 1)]]
        self.assertIsNone(find_anchor_piece(self.registry, others, cluster))

    def testdesired_anchor_position(self):
        self.assertEqual(desired_anchor_position((10.0, 20.0), self.cells[(1, 0)]),
                         (10.0, 20.0 + CELL))


class TestSolvedPose(SolverTestCase):

    def testpose_lands_anchor_without_mutation(self):
        cluster = self.merge((0, 0), (0, 1))
        cluster.rotate_cw()
        cluster.rotation += 0.2
        rotation_before = cluster.rotation
        position_before = cluster.position.as_tuple()

        anchor = self.cells[(0, 1)]
        pose = compute_solved_pose(cluster, anchor, (500.0, 600.0))
        self.assertEqual(cluster.rotation, rotation_before)
        self.assertEqual(cluster.position.as_tuple(), position_before)
        self.assertEqual(pose.rotation, 0.0)

        cluster.normalize_rotation()
        cluster.position.set(pose.x, pose.y)
        self.assertPointsClose(self.registry.piece_origin_in_layer(anchor), (500.0, 600.0))


class TestSolveAndAnimate(SolverTestCase):

    def setUp(self):
        super().setUp()
        self.engine = TweenEngine()

    def solve(self, pieces=None, options=None, origin=(0.0, 0.0)):
        pieces = self.pieces if pieces is None else pieces
        coro = solve_and_animate(self.registry, pieces, origin, self.engine, options)
        return asyncio.run(self.engine.run_until_complete(coro))

    def testno_pieces_returns_none(self):
        self.assertIsNone(self.solve(pieces=[]))

    def testassembled_puzzle_lands_on_board(self):
        # lay out solved relative to each other, away from the board
        offset = {k: (x + 640.0, y + 480.0) for k, (x, y) in initial_layout(
            [p.definition for p in self.pieces]).items()}
        self.registry.create_initial_clusters(self.pieces, offset)
        cluster = self.merge((0, 0), (0, 1), (1, 0), (1, 1))
        cluster.rotate_cw()
        self.assertTrue(self.registry.is_complete)

        result = self.solve(origin=(20.0, 30.0))

        self.assertIs(result.cluster, cluster)
        self.assertIs(result.anchor, self.cells[(0, 0)])
        self.assertFalse(result.interrupted)
        self.assertEqual((cluster.rotation, cluster.rotation_q), (0.0, 0))
        self.assertEqual(cluster.position.as_tuple(), (result.pose.x, result.pose.y))
        for piece in self.pieces:
            col, row = piece.definition.col, piece.definition.row
            self.assertPointsClose(self.registry.piece_origin_in_layer(piece),
                                   (20.0 + col * CELL, 30.0 + row * CELL))
        self.assertEqual(self.engine.active_count, 0)

    def testwinner_only_moves(self):
        winner = self.merge((1, 0), (1, 1))
        loner = self.cluster(0, 0)
        loner_before = loner.position.as_tuple()

        result = self.solve(origin=(0.0, 0.0))

        self.assertIs(result.cluster, winner)
        self.assertIs(result.anchor, self.cells[(1, 0)])
        self.assertPointsClose(self.registry.piece_origin_in_layer(self.cells[(1, 0)]), (0.0, CELL))
        self.assertEqual(loner.position.as_tuple(), loner_before)

    def testzero_duration_needs_no_frames(self):
        options = SolveOptions(duration=0)
        result = asyncio.run(solve_and_animate(
            self.registry, self.pieces, (5.0, 5.0), self.engine, options))
        self.assertPointsClose(self.registry.piece_origin_in_layer(result.anchor), (5.0, 5.0))

    def testexplicit_cluster_and_anchor(self):
        target = self.cluster(1, 1)
        anchor = self.cells[(1, 1)]
        result = self.solve(options=SolveOptions(cluster=target, anchor=anchor, duration=0.2))
        self.assertIs(result.cluster, target)
        self.assertPointsClose(self.registry.piece_origin_in_layer(anchor), (CELL, CELL))

    def testanchor_outside_cluster_is_replaced(self):
        target = self.cluster(1, 1)
        result = self.solve(options=SolveOptions(cluster=target, anchor=self.cells[(0, 0)],
                                                 duration=0.1))
        self.assertIs(result.anchor, self.cells[(1, 1)])

    def testinterrupted_solve_still_snaps(self):
        cluster = self.cluster(0, 0)
        cluster.rotate_cw()

        async def scenario():
            task = asyncio.ensure_future(solve_and_animate(
                self.registry, self.pieces, (0.0, 0.0), self.engine))
            await asyncio.sleep(0)          # solver starts its tweens
            self.engine.update(0.1)
            self.engine.kill_tweens_of(cluster.transform)
            self.engine.kill_tweens_of(cluster.position)
            return await task

        result = asyncio.run(scenario())
        self.assertTrue(result.interrupted)
        self.assertEqual(cluster.rotation, 0.0)
        self.assertEqual(cluster.rotation_q, 0)
        self.assertEqual(cluster.position.as_tuple(), (result.pose.x, result.pose.y))

    def testposition_takeover_still_resets_rotation(self):
        cluster = self.cluster(0, 0)
        cluster.rotate_cw()

        async def scenario():
            task = asyncio.ensure_future(solve_and_animate(
                self.registry, self.pieces, (0.0, 0.0), self.engine))
            await asyncio.sleep(0)
            self.engine.update(0.1)
            self.engine.to(cluster.position, {"x": 999.0, "y": 999.0}, duration=5.0)
            return await self.engine.run_until_complete(task)

        result = asyncio.run(scenario())
        self.assertTrue(result.interrupted)
        self.assertEqual(cluster.rotation, 0.0)
        self.assertEqual(cluster.rotation_q, 0)
        # the newer position tween keeps ownership of the position
        self.assertTrue(self.engine.is_tweening(cluster.position))
        self.assertNotEqual(cluster.position.as_tuple(), (result.pose.x, result.pose.y))

    def testrotation_tween_does_not_cancel_position_tween(self):
        cluster = self.cluster(0, 0)
        cluster.rotate_cw()

        async def scenario():
            task = asyncio.ensure_future(solve_and_animate(
                self.registry, self.pieces, (0.0, 0.0), self.engine))
            await asyncio.sleep(0)
            running = self.engine.active_count
            self.engine.kill_all()
            await task
            return running

        self.assertEqual(asyncio.run(scenario()), 2)


def test_superseded_solve_leaves_cluster_to_newer_animation():
    pieces = make_pieces()
    registry = make_registry(pieces, SCATTERED)
    engine = TweenEngine()

    async def scenario():
        first = asyncio.ensure_future(solve_and_animate(registry, pieces, (0.0, 0.0), engine))
        await asyncio.sleep(0)
        second = asyncio.ensure_future(
            solve_and_animate(registry, pieces, (300.0, 300.0), engine))
        return await engine.run_until_complete(asyncio.gather(first, second))

    first, second = asyncio.run(scenario())
    assert first.interrupted
    assert not second.interrupted
    origin = registry.piece_origin_in_layer(second.anchor)
    assert math.isclose(origin[0], 300.0, abs_tol=1e-6)
    assert math.isclose(origin[1], 300.0, abs_tol=1e-6)
