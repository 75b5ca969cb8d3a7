"""Generates solvable colour-sort levels.

Levels are built by "reverse solving": start from a sorted layout and undo
randomly chosen legal pours.  Every step backwards is the exact inverse of a
forward pour, so the scrambled layout can always be poured back to the
solution in at most as many moves as were undone.
"""

from __future__ import annotations

import logging
import random
import zlib
from typing import Callable, Sequence

from colorsort.config import DEFAULT_POLICY, GenerationPolicy
from colorsort.engine.gamerules.rules import is_solved
from colorsort.engine.gamestate.state import PuzzleState
from colorsort.engine.gamevalidator.validator import Validator
from colorsort.errors import GenerationFailed, Rejected
from colorsort.models.color import ColorToken
from colorsort.models.level import Level, Tier
from colorsort.models.move import Move
from colorsort.models.vessel import Vessel

logger = logging.getLogger(__name__)

# Share of a themed pack given to each tier, easiest first.
PACK_DISTRIBUTION: dict[Tier, float] = {
    Tier.EASY: 0.20,
    Tier.MEDIUM: 0.30,
    Tier.HARD: 0.30,
    Tier.EXPERT: 0.20,
}

# Bit layout of derived seeds: theme CRC32 | tier rank (2 bits) | level number.
_TIER_SHIFT = 19
_THEME_SHIFT = _TIER_SHIFT + 2
MAX_LEVEL_NUMBER = 1 << _TIER_SHIFT


class GameGenerator:
    """Creates solvable puzzles by scrambling backwards from the solved state."""

    @staticmethod
    def solved(
        colors: Sequence[ColorToken],
        empty_vessels: int,
        capacity: int,
    ) -> PuzzleState:
        """Return the goal layout: one full vessel per colour, then the empties."""
        vessels = [
            Vessel.with_units(f"v{i + 1}", [color] * capacity, capacity)
            for i, color in enumerate(colors)
        ]
        for i in range(empty_vessels):
            vessels.append(Vessel.empty(f"v{len(colors) + i + 1}", capacity))
        return PuzzleState(vessels=tuple(vessels))

    @staticmethod
    def reverse_candidates(state: PuzzleState) -> list[Move]:
        """Every forward pour that could have produced *state*.

        For each returned move ``m`` there is a predecessor ``p`` with
        ``apply_move(p, m.from_vessel_id, m.to_vessel_id)`` equal to *state*
        and transferring exactly ``m.count`` units.  Ordered by vessel index
        then count, so a seeded choice over it is reproducible.
        """
        candidates: list[Move] = []
        for receiver in state.vessels:
            if receiver.is_empty:
                continue
            token = receiver.top_token
            run = receiver.top_run_length
            for giver in state.vessels:
                if giver.id == receiver.id:
                    continue
                for count in range(1, min(run, giver.available_space) + 1):
                    # before the pour the receiver was empty or showed the same colour
                    if count == run and count != len(receiver.units):
                        continue
                    # the pour moved exactly `count`: the giver's run was that long,
                    # or the receiver filled up
                    if giver.top_token == token and not receiver.is_full:
                        continue
                    candidates.append(
                        Move(
                            from_vessel_id=giver.id,
                            to_vessel_id=receiver.id,
                            token=token,
                            count=count,
                        )
                    )
        return candidates

    @staticmethod
    def unpour(state: PuzzleState, move: Move) -> PuzzleState:
        """Step *state* back in time across the forward pour *move*."""
        receiver = state.vessel(move.to_vessel_id)
        giver = state.vessel(move.from_vessel_id)
        return state.replace_vessels(
            {
                receiver.id: receiver.remove_top(move.count),
                giver.id: giver.add_units([move.token] * move.count),
            }
        )

    @staticmethod
    def scramble(state: PuzzleState, steps: int, rng: random.Random) -> PuzzleState:
        """Undo *steps* random pours, never immediately redoing the last one."""
        previous: Move | None = None
        for _ in range(steps):
            candidates = GameGenerator.reverse_candidates(state)
            if not candidates:
                break
            if previous is not None:
                backtrack = previous.reverse()
                if backtrack in candidates and len(candidates) > 1:
                    candidates.remove(backtrack)
            move = rng.choice(candidates)
            state = GameGenerator.unpour(state, move)
            previous = move
        return state

    @staticmethod
    def generate(
        tier: Tier,
        level_number: int,
        seed: int,
        policy: GenerationPolicy = DEFAULT_POLICY,
        theme: str | None = None,
    ) -> tuple[PuzzleState, Level]:
        """Return a validated, solvable puzzle and its level metadata.

        Output depends only on the arguments: all randomness comes from a
        stream seeded with ``(seed, tier, level_number)``.  Raises
        :class:`GenerationFailed` when no candidate is accepted within
        ``policy.max_attempts``.
        """
        tier = Tier(tier)
        params = policy.tier(tier)
        if params.color_range[1] > len(ColorToken):
            raise ValueError(
                f"Tier {tier} asks for up to {params.color_range[1]} colours; "
                f"only {len(ColorToken)} exist."
            )
        rng = random.Random(f"{seed}:{tier.value}:{level_number}")

        for attempt in range(1, policy.max_attempts + 1):
            color_count = rng.randint(*params.color_range)
            colors = rng.sample(list(ColorToken), color_count)
            steps = rng.randint(*params.scramble_range)

            goal = GameGenerator.solved(colors, params.empty_vessels, params.capacity)
            candidate = GameGenerator._relabel(GameGenerator.scramble(goal, steps, rng), rng)

            if is_solved(candidate) or not Validator.quick_check(candidate):
                logger.debug("Attempt %d for %s #%d degenerate", attempt, tier, level_number)
                continue

            try:
                report = Validator.validate(candidate, tier=tier, policy=policy)
            except Rejected as exc:
                logger.debug(
                    "Attempt %d for %s #%d rejected: %s", attempt, tier, level_number, exc
                )
                continue

            if report.optimal_moves < policy.min_optimal_moves:
                logger.debug(
                    "Attempt %d for %s #%d too short (%d moves)",
                    attempt, tier, level_number, report.optimal_moves,
                )
                continue

            level = Level(
                id=_level_id(level_number, theme),
                name=_level_name(level_number, theme),
                tier=tier,
                vessels=candidate.vessels,
                optimal_moves=report.optimal_moves,
                move_budget=report.move_budget,
                star_thresholds=report.star_thresholds,
                seed=seed,
                level_number=level_number,
                description=(
                    f"Sort {color_count} colours into {len(candidate.vessels)} vessels"
                ),
                warnings=report.warnings,
            )
            return candidate, level

        logger.warning(
            "Gave up on %s level %d (seed %d) after %d attempts",
            tier, level_number, seed, policy.max_attempts,
        )
        raise GenerationFailed(
            f"Failed to generate a valid {tier} level #{level_number} "
            f"(seed {seed}) after {policy.max_attempts} attempts.",
            attempts=policy.max_attempts,
        )

    @staticmethod
    def generate_levels(
        tier: Tier,
        count: int,
        start: int = 1,
        theme: str | None = None,
        policy: GenerationPolicy = DEFAULT_POLICY,
        on_progress: Callable[[int, int], None] | None = None,
    ) -> list[Level]:
        """Generate *count* consecutive levels with reproducible derived seeds."""
        if start + count > MAX_LEVEL_NUMBER:
            raise ValueError(
                f"Levels {start}..{start + count - 1} run past the last numbered slot "
                f"({MAX_LEVEL_NUMBER - 1})."
            )
        levels: list[Level] = []
        for i in range(count):
            number = start + i
            _, level = GameGenerator.generate(
                tier, number, derive_seed(tier, number, theme), policy=policy, theme=theme
            )
            levels.append(level)
            if on_progress is not None:
                on_progress(i + 1, count)
        return levels

    @staticmethod
    def generate_pack(
        themes: Sequence[str],
        levels_per_theme: int = 50,
        policy: GenerationPolicy = DEFAULT_POLICY,
        on_progress: Callable[[str, int, int], None] | None = None,
    ) -> dict[str, list[Level]]:
        """Generate one pack per theme, tiers ordered from easy to expert."""
        pack: dict[str, list[Level]] = {}
        for theme in themes:
            levels: list[Level] = []
            number = 1
            for tier, count in pack_distribution(levels_per_theme).items():
                offset = number - 1

                def _progress(current: int, _total: int, offset: int = offset) -> None:
                    if on_progress is not None:
                        on_progress(theme, offset + current, levels_per_theme)

                levels.extend(
                    GameGenerator.generate_levels(
                        tier, count, start=number, theme=theme,
                        policy=policy, on_progress=_progress,
                    )
                )
                number += count
            pack[theme] = levels
        return pack

    # -- helpers --------------------------------------------------------------

    @staticmethod
    def _relabel(state: PuzzleState, rng: random.Random) -> PuzzleState:
        """Shuffle vessel order and renumber ids to match the new order."""
        vessels = list(state.vessels)
        rng.shuffle(vessels)
        return PuzzleState(
            vessels=tuple(
                Vessel(id=f"v{i + 1}", units=v.units, capacity=v.capacity)
                for i, v in enumerate(vessels)
            )
        )


def derive_seed(tier: Tier, level_number: int, theme: str | None = None) -> int:
    """Stable seed for a pack slot, unique per (theme, tier, level number).

    Theme (CRC32 rather than the salted built-in hash), tier rank and level
    number occupy disjoint bit fields, and the result stays below 2**53 so it
    survives a round trip through JSON readers that use doubles.
    """
    if not 0 <= level_number < MAX_LEVEL_NUMBER:
        raise ValueError(
            f"Level number must be in [0, {MAX_LEVEL_NUMBER}), got {level_number}."
        )
    theme_hash = zlib.crc32(theme.encode("utf-8")) if theme else 0
    return (theme_hash << _THEME_SHIFT) | (Tier(tier).rank << _TIER_SHIFT) | level_number


def pack_distribution(total: int) -> dict[Tier, int]:
    """Split *total* levels across tiers; rounding slack goes to the last tier."""
    counts: dict[Tier, int] = {}
    remaining = total
    tiers = list(PACK_DISTRIBUTION)
    for tier in tiers[:-1]:
        counts[tier] = min(remaining, round(total * PACK_DISTRIBUTION[tier]))
        remaining -= counts[tier]
    counts[tiers[-1]] = remaining
    return counts


def _level_id(number: int, theme: str | None) -> str:
    prefix = theme.lower().replace(" ", "_") if theme else "level"
    return f"{prefix}_{number:03d}"


def _level_name(number: int, theme: str | None) -> str:
    return f"{theme} #{number}" if theme else f"#{number}"
