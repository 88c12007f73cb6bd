"""
Tests for the AI opponent: move parsing, suggesters and the turn runner.

Run from project root: python -m pytest tests/test_ai -v
Or run directly: python tests/test_ai/test_ai.py
"""

import asyncio
import itertools
import json
import sys
import unittest
from pathlib import Path
from unittest.mock import patch

import httpx

# Add project root to path
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from client.ai import (
    END_TURN, AITurnRunner, HeuristicSuggester, LLMSuggester, Move,
    MoveSuggester, SuggestionError, default_suggester, parse_moves
)
from client.config import settings
from engine import Card, GameState, Player, add_to_set, end_turn, execute_move
from shared.enums import ActionKind, CardType, GamePhase, MoveKind, PropertyColor


_ids = itertools.count(1)


def money(value: int) -> Card:
    return Card(f"money-{next(_ids)}", f"{value}M", CardType.MONEY, value)


def prop(color: PropertyColor, value: int = 1) -> Card:
    return Card(f"prop-{next(_ids)}", f"{color.value} lot", CardType.PROPERTY, value, color=color)


def action(kind: ActionKind, name: str, value: int = 1) -> Card:
    return Card(f"action-{next(_ids)}", name, CardType.ACTION, value, action=kind)


def ai_state(hand=(), properties=(), opponent_properties=(), actions_remaining=3) -> GameState:
    """State where the AI (seat 1) is in its play phase."""
    ai = Player("p2", "AI Opponent", is_ai=True, hand=tuple(hand))
    for card in properties:
        ai = add_to_set(ai, card)

    human = Player("p1", "Player 1")
    for card in opponent_properties:
        human = add_to_set(human, card)

    return GameState(
        players=(human, ai),
        active_player_index=1,
        phase=GamePhase.PLAY_PHASE,
        actions_remaining=actions_remaining,
    )


class FakeSession:
    """Minimal stand-in for GameController."""

    def __init__(self, state: GameState):
        self.state = state
        self.applied: list[tuple] = []
        self.turns_ended = 0

    def execute_move(self, kind, card_id):
        self.applied.append((kind, card_id))
        self.state = execute_move(self.state, kind, card_id)

    def end_turn(self):
        self.turns_ended += 1
        self.state = end_turn(self.state)


class StaticSuggester(MoveSuggester):
    def __init__(self, moves):
        self.moves = moves
        self.calls = 0

    async def suggest(self, state):
        self.calls += 1
        return list(self.moves)


class FailingSuggester(MoveSuggester):
    async def suggest(self, state):
        raise SuggestionError("service unavailable")


# =============================================================================
# Move parsing
# =============================================================================

class TestMoveParsing(unittest.TestCase):

    def test_parse_moves_drops_malformed_entries(self):
        raw = [
            {"action": "bank", "card_id": "x"},
            {"action": "PROPERTY", "cardId": "y"},
            "junk",
            {"action": "BANK"},
            {"action": "FLY", "card_id": "z"},
            {"action": "end_turn"},
        ]

        self.assertEqual(parse_moves(raw), [
            Move("BANK", "x"),
            Move("PROPERTY", "y"),
            Move(END_TURN),
        ])

    def test_move_kind(self):
        self.assertEqual(Move("ACTION_PLAY", "a").kind, MoveKind.ACTION_PLAY)
        self.assertIsNone(Move(END_TURN).kind)
        self.assertTrue(Move(END_TURN).is_end_turn)
        self.assertEqual(Move(END_TURN).to_dict(), {"action": END_TURN})


# =============================================================================
# Scripted suggester
# =============================================================================

class TestHeuristicSuggester(unittest.TestCase):

    def suggest(self, state):
        return asyncio.run(HeuristicSuggester().suggest(state))

    def test_priority_and_budget(self):
        red = prop(PropertyColor.RED)
        debt = action(ActionKind.DEBT_COLLECTOR, "Debt Collector", 3)
        pass_go = action(ActionKind.PASS_GO, "Pass Go")
        state = ai_state(hand=[money(1), money(5), debt, red, pass_go])

        moves = self.suggest(state)

        self.assertEqual(moves, [
            Move("PROPERTY", red.id),
            Move("ACTION_PLAY", pass_go.id),
            Move("ACTION_PLAY", debt.id),
            Move(END_TURN),
        ])

    def test_banks_highest_value_first(self):
        one, five = money(1), money(5)
        just_say_no = action(ActionKind.JUST_SAY_NO, "Just Say No", 4)
        state = ai_state(hand=[one, just_say_no, five], actions_remaining=2)

        moves = self.suggest(state)

        self.assertEqual(moves, [
            Move("BANK", five.id),
            Move("BANK", just_say_no.id),
            Move(END_TURN),
        ])

    def test_sly_deal_only_with_a_target(self):
        sly = action(ActionKind.SLY_DEAL, "Sly Deal", 3)

        protected = ai_state(
            hand=[sly],
            opponent_properties=[prop(PropertyColor.BROWN), prop(PropertyColor.BROWN)],
        )
        self.assertNotIn(Move("ACTION_PLAY", sly.id), self.suggest(protected))

        exposed = ai_state(hand=[sly], opponent_properties=[prop(PropertyColor.RED)])
        self.assertEqual(self.suggest(exposed)[0], Move("ACTION_PLAY", sly.id))


# =============================================================================
# LLM suggester
# =============================================================================

class TestLLMSuggester(unittest.TestCase):

    def run_suggest(self, handler, state):
        async def run():
            async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
                suggester = LLMSuggester(
                    base_url="http://llm.local/v1/",
                    model_name="test-model",
                    api_key="secret",
                    client=client,
                )
                return await suggester.suggest(state)

        return asyncio.run(run())

    def test_suggest_parses_reply(self):
        card = money(3)
        state = ai_state(hand=[card])
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            content = f'Here you go: [{{"action": "BANK", "card_id": "{card.id}"}}, {{"action": "END_TURN"}}]'
            return httpx.Response(200, json={"choices": [{"message": {"content": content}}]})

        moves = self.run_suggest(handler, state)

        self.assertEqual(moves, [Move("BANK", card.id), Move(END_TURN)])
        request = requests[0]
        self.assertEqual(request.url.path, "/v1/chat/completions")
        self.assertEqual(request.headers["authorization"], "Bearer secret")

        payload = json.loads(request.content)
        self.assertEqual(payload["model"], "test-model")
        prompt = json.loads(payload["messages"][1]["content"])
        self.assertEqual(prompt["hand"][0]["card_id"], card.id)
        self.assertEqual(prompt["actions_remaining"], 3)

    def test_http_error_becomes_suggestion_error(self):
        def handler(request):
            return httpx.Response(500, json={"error": "boom"})

        with self.assertRaises(SuggestionError):
            self.run_suggest(handler, ai_state(hand=[money(1)]))

    def test_reply_without_moves(self):
        def handler(request):
            return httpx.Response(200, json={"choices": [{"message": {"content": "I would bank."}}]})

        with self.assertRaises(SuggestionError):
            self.run_suggest(handler, ai_state())

    def test_reply_without_choices(self):
        def handler(request):
            return httpx.Response(200, json={"choices": []})

        with self.assertRaises(SuggestionError):
            self.run_suggest(handler, ai_state())

    def test_default_suggester_follows_settings(self):
        with patch.object(settings, "llm_base_url", ""):
            self.assertIsInstance(default_suggester(), HeuristicSuggester)
        with patch.object(settings, "llm_base_url", "http://llm.local/v1"):
            self.assertIsInstance(default_suggester(), LLMSuggester)


# =============================================================================
# Turn runner
# =============================================================================

class TestAITurnRunner(unittest.TestCase):

    def play(self, suggester, state):
        session = FakeSession(state)
        runner = AITurnRunner(suggester, move_delay=0)
        applied = asyncio.run(runner.play_turn(session))
        self.assertFalse(runner.is_running)
        return session, applied

    def test_applies_moves_then_ends_turn(self):
        cash, land = money(2), prop(PropertyColor.GREEN)
        suggester = StaticSuggester([
            Move("BANK", cash.id), Move("PROPERTY", land.id), Move(END_TURN),
        ])

        session, applied = self.play(suggester, ai_state(hand=[cash, land]))

        self.assertEqual(applied, 2)
        self.assertEqual(suggester.calls, 1)
        self.assertEqual(session.turns_ended, 1)
        self.assertEqual(session.state.active_player_index, 0)
        self.assertEqual(session.state.players[1].bank, (cash,))

    def test_skips_cards_no_longer_in_hand(self):
        cash = money(2)
        suggester = StaticSuggester([
            Move("BANK", "gone-1"), Move("BANK", cash.id), Move("BANK", cash.id),
        ])

        session, applied = self.play(suggester, ai_state(hand=[cash]))

        self.assertEqual(applied, 1)
        self.assertEqual(session.applied, [(MoveKind.BANK, cash.id)])

    def test_rejected_move_is_not_counted(self):
        cash, land = money(2), prop(PropertyColor.ORANGE)
        suggester = StaticSuggester([
            Move("PROPERTY", cash.id), Move("PROPERTY", land.id),
        ])

        session, applied = self.play(suggester, ai_state(hand=[cash, land]))

        self.assertEqual(applied, 1)
        self.assertEqual(session.state.players[1].hand, (cash,))
        self.assertEqual(session.state.players[1].properties[0].cards, (land,))

    def test_stops_at_end_turn(self):
        cash = money(2)
        session, applied = self.play(
            StaticSuggester([Move(END_TURN), Move("BANK", cash.id)]),
            ai_state(hand=[cash]),
        )

        self.assertEqual(applied, 0)
        self.assertEqual(session.turns_ended, 1)

    def test_stops_when_actions_run_out(self):
        first, second = money(1), money(2)
        session, applied = self.play(
            StaticSuggester([Move("BANK", first.id), Move("BANK", second.id)]),
            ai_state(hand=[first, second], actions_remaining=1),
        )

        self.assertEqual(applied, 1)
        self.assertEqual(session.state.players[1].hand, (second,))

    def test_stops_after_a_win(self):
        last_brown = prop(PropertyColor.BROWN)
        cash = money(1)
        owned = [
            prop(PropertyColor.DARK_BLUE), prop(PropertyColor.DARK_BLUE),
            prop(PropertyColor.UTILITY), prop(PropertyColor.UTILITY),
            prop(PropertyColor.BROWN),
        ]
        session, applied = self.play(
            StaticSuggester([Move("PROPERTY", last_brown.id), Move("BANK", cash.id)]),
            ai_state(hand=[last_brown, cash], properties=owned),
        )

        self.assertEqual(applied, 1)
        self.assertEqual(session.state.winner, "AI Opponent")
        self.assertEqual(session.state.phase, GamePhase.GAME_OVER)

    def test_failed_suggestion_still_ends_turn(self):
        session, applied = self.play(FailingSuggester(), ai_state(hand=[money(1)]))

        self.assertEqual(applied, 0)
        self.assertEqual(session.turns_ended, 1)
        self.assertEqual(session.state.phase, GamePhase.START_TURN)

    def test_cancelled_between_moves(self):
        first, second = money(1), money(2)
        session = FakeSession(ai_state(hand=[first, second]))
        runner = AITurnRunner(
            StaticSuggester([Move("BANK", first.id), Move("BANK", second.id)]),
            move_delay=10,
        )

        async def run():
            task = asyncio.create_task(runner.play_turn(session))
            while not session.applied:
                await asyncio.sleep(0)
            task.cancel()
            with self.assertRaises(asyncio.CancelledError):
                await task

        asyncio.run(run())

        self.assertEqual(len(session.applied), 1)
        self.assertEqual(session.turns_ended, 0)
        self.assertFalse(runner.is_running)


def run_tests():
    """Run all AI tests."""
    loader = unittest.TestLoader()
    suite = unittest.TestSuite()

    test_classes = [
        TestMoveParsing,
        TestHeuristicSuggester,
        TestLLMSuggester,
        TestAITurnRunner,
    ]

    for test_class in test_classes:
        suite.addTests(loader.loadTestsFromTestCase(test_class))

    runner = unittest.TextTestRunner(verbosity=2)
    result = runner.run(suite)

    return result.wasSuccessful()


if __name__ == "__main__":
    sys.exit(0 if run_tests() else 1)
