import pytest

from jztscript.commands import Command
from jztscript.context import ContextOptions, ContextState, ScriptContext
from jztscript.directions import Direction
from jztscript.errors import ScriptRuntimeFault
from jztscript.ir import ScrollLine
from jztscript.script import Script

from conftest import FakeOwner


def test_new_context_binds_owner_and_initializes_cursors(owner, run_script):
    context = run_script(":a\nEND\n:b\n:a")
    assert owner.script_context is context
    assert context.command_index == 0
    assert context.label_cursors == {"A": 0, "B": 0}
    assert context.state is ContextState.RUNNING


def test_jump_resumes_after_label_and_zap_selects_next_occurrence(owner):
    script = Script("s", ":a\nMOVE N\n:a\nMOVE S")
    context = ScriptContext(script, owner)

    assert context.jump_to_label("a")
    assert context.command_index == 0

    context.zap_label("a")
    assert context.jump_to_label("a")
    assert context.command_index == 2

    context.zap_label("a")
    context.zap_label("a")
    assert context.label_cursors["A"] == 2
    assert not context.jump_to_label("a")
    assert context.command_index == 2

    context.restore_label("a")
    context.restore_label("a")
    context.restore_label("a")
    assert context.label_cursors["A"] == 0


def test_jump_to_unknown_label_is_a_no_op(run_script):
    context = run_script("WAIT\nEND")
    assert not context.jump_to_label("nowhere")
    assert context.command_index == 0


def test_wait_repeats_then_advances(owner, run_script):
    context = run_script("WAIT 3\nSAY \"done\"")
    wait = context.script.commands[0]

    context.execute_tick()
    assert context.command_index == 0
    assert context.stored_command is wait
    assert context.heap == {"0<cycles>": 2}

    context.execute_tick()
    assert context.command_index == 0

    context.execute_tick()
    assert context.command_index == 1
    assert context.stored_command is None
    assert context.heap == {}
    assert owner.said == []


def test_continue_chain_runs_within_one_tick(owner, run_script):
    context = run_script("SET x 5\nGIVE score 10\nEND")
    context.execute_tick()
    assert owner.counters == {"X": 5, "SCORE": 10}
    assert context.state is ContextState.STOPPED
    assert context.command_index == -1


def test_stopped_context_ignores_messages(owner, run_script):
    context = run_script("END\n:touch\nSAY \"ouch\"")
    context.execute_tick()
    context.send_message("touch")
    context.execute_tick()
    assert context.state is ContextState.STOPPED
    assert owner.said == []


def test_halted_context_revives_on_message(owner, run_script):
    context = run_script("MOVE N\n:touch\nSAY \"ouch\"")
    context.execute_tick()
    context.execute_tick()
    assert context.state is ContextState.HALTED
    assert owner.said == ["ouch"]

    context.send_message("TOUCH")
    context.execute_tick()
    assert owner.said == ["ouch", "ouch"]


def test_one_message_is_handled_per_tick(owner, run_script):
    context = run_script(
        """
        WAIT 10
        :a
        SAY "a"
        WAIT 10
        :b
        SAY "b"
        WAIT 10
        """
    )
    context.send_message("a")
    context.send_message("b")
    context.execute_tick()
    assert owner.said == ["a"]
    context.execute_tick()
    assert owner.said == ["a", "b"]


def test_unknown_message_is_discarded(owner, run_script):
    context = run_script("WAIT 2\nSAY \"x\"")
    context.send_message("nothing")
    context.execute_tick()
    assert not context.message_inbox
    assert context.command_index == 0


def test_locked_context_drops_messages(owner, run_script):
    context = run_script(
        """
        LOCK
        WAIT 5
        :touch
        SAY "hit"
        """
    )
    context.execute_tick()
    assert context.locked
    context.send_message("touch")
    context.execute_tick()
    assert owner.said == []
    assert not context.message_inbox


def test_jump_discards_repeat_progress(owner, run_script):
    context = run_script(
        """
        WAIT 5
        END
        :go
        SAY "went"
        """
    )
    context.execute_tick()
    assert context.heap
    context.send_message("go")
    context.execute_tick()
    assert owner.said == ["went"]
    assert context.stored_command is None
    assert context.heap == {}


def test_if_jump_continues_in_same_tick(owner, run_script):
    context = run_script(
        """
        IF x > 2 big
        SAY "small"
        END
        :big
        SAY "big"
        """
    )
    owner.counters["X"] = 3
    context.execute_tick()
    assert owner.said == ["big"]


def test_if_without_jump_falls_through(owner, run_script):
    context = run_script(
        """
        IF x > 2 big
        SAY "small"
        END
        :big
        SAY "big"
        """
    )
    context.execute_tick()
    assert owner.said == ["small"]
    assert context.state is ContextState.STOPPED


def test_jump_loop_is_bounded_per_tick(owner, run_script):
    context = run_script(
        """
        :loop
        GIVE spins 1
        SEND loop
        """,
        options=ContextOptions(max_jumps_per_tick=2),
    )
    context.execute_tick()
    assert owner.counters["SPINS"] == 3
    context.execute_tick()
    assert owner.counters["SPINS"] == 6


def test_forceful_move_retries_stuck_direction(owner, run_script):
    owner.blocked = {Direction.NORTH}
    context = run_script("MOVE N 2\nSAY \"arrived\"")

    context.execute_tick()
    assert owner.moves == []
    assert context.heap == {"0<stuck>": "NORTH", "0<count>": 2}

    owner.blocked = set()
    context.execute_tick()
    context.execute_tick()
    assert owner.moves == [Direction.NORTH, Direction.NORTH]
    assert context.command_index == 1


def test_gentle_move_gives_up_when_blocked(owner, run_script):
    owner.blocked = {Direction.EAST}
    context = run_script("TRY E 3\nSAY \"gave up\"")
    context.execute_tick()
    assert owner.moves == []
    assert context.command_index == 1
    context.execute_tick()
    assert owner.said == ["gave up"]


def test_counted_move_takes_one_tick_per_step(owner, run_script):
    context = run_script("MOVE S 3")
    for _ in range(3):
        assert context.is_running()
        context.execute_tick()
    assert owner.moves == [Direction.SOUTH] * 3
    assert context.state is ContextState.HALTED


def test_modifiers_cancel_out_when_moving(owner, run_script):
    context = run_script("MOVE CW CCW N")
    context.execute_tick()
    assert owner.moves == [Direction.NORTH]


def test_take_jumps_when_counter_is_short(owner, run_script):
    context = run_script(
        """
        TAKE 5 gems poor
        SAY "paid"
        END
        :poor
        SAY "not enough"
        """
    )
    owner.counters["GEMS"] = 2
    context.execute_tick()
    assert owner.said == ["not enough"]
    assert owner.counters["GEMS"] == 2


def test_short_take_without_label_ends_the_tick(owner, run_script):
    context = run_script("TAKE 5 gems\nSAY \"paid\"\nEND")
    owner.counters["GEMS"] = 2
    context.execute_tick()
    assert owner.said == []
    assert owner.counters["GEMS"] == 2
    assert context.command_index == 1
    context.execute_tick()
    assert owner.said == ["paid"]


def test_take_subtracts_and_continues(owner, run_script):
    context = run_script("TAKE gems 2\nSAY \"paid\"")
    owner.counters["GEMS"] = 5
    context.execute_tick()
    assert owner.counters["GEMS"] == 3
    assert owner.said == ["paid"]


def test_send_to_other_recipient_goes_through_owner(owner, run_script):
    context = run_script("SEND door open\nSEND all reset\nEND")
    context.execute_tick()
    assert owner.sent == [("DOOR", "OPEN"), ("ALL", "RESET")]


def test_scroll_lines_flush_before_next_command(owner, run_script):
    context = run_script(
        """
        SCROLL BOLD "Hello"
        SCROLL "Pick" choice
        WAIT
        """
    )
    context.execute_tick()
    assert owner.scrolls == [
        (ScrollLine("Hello", True), ScrollLine("Pick", False, "CHOICE")),
    ]
    assert context.scroll_content == []


def test_scroll_lines_flush_at_end_of_script(owner, run_script):
    context = run_script('SCROLL "Bye"')
    context.execute_tick()
    assert owner.scrolls == [(ScrollLine("Bye"),)]


def test_board_commands_reach_owner(owner, run_script):
    context = run_script(
        """
        PUT N Red Gem
        BECOME Boulder
        SHOOT SEEK
        THROWSTAR OPP N
        CHAR 2
        TORCH 4
        PLAY "cde"
        WALK E
        STAND
        VICTORY
        """
    )
    owner.player = Direction.WEST
    for _ in range(8):
        context.execute_tick()
    assert [call[0] for call in owner.calls] == [
        "put",
        "replace",
        "shoot",
        "shoot",
        "char",
        "torch",
        "play",
        "walk",
        "walk",
        "victory",
    ]
    assert owner.calls[2] == ("shoot", Direction.WEST, False)
    assert owner.calls[3] == ("shoot", Direction.SOUTH, True)
    assert owner.calls[7] == ("walk", Direction.EAST)
    assert owner.calls[8] == ("walk", None)


def test_die_magnetically_pulls_player(owner, run_script):
    owner.player = Direction.EAST
    context = run_script("DIE MAGNETICALLY")
    context.execute_tick()
    assert owner.calls == [("remove",), ("push_player", Direction.WEST)]


def test_if_expression_variants(owner, run_script):
    context = run_script(
        """
        IF NOT ADJACENT far
        SAY "adjacent"
        END
        :far
        IF EXISTS 2 Gem rich
        IF PEEP 3 seen
        SAY "nothing"
        END
        :rich
        SAY "rich"
        END
        :seen
        SAY "seen"
        """
    )
    owner.visible_radius = 2
    context.execute_tick()
    assert owner.said == ["seen"]


def test_isolation_between_contexts_sharing_a_script():
    script = Script(
        "shared",
        ":a\nWAIT 4\n:a\nWAIT 4\n:b\nSAY \"b\"",
    )
    first_owner, second_owner = FakeOwner(), FakeOwner()
    first = ScriptContext(script, first_owner)
    second = ScriptContext(script, second_owner)

    first.zap_label("a")
    first.send_message("a")
    first.execute_tick()
    second.execute_tick()
    second.send_message("b")
    second.execute_tick()

    assert first.command_index == 1
    assert first.label_cursors == {"A": 1, "B": 0}
    assert first.heap == {"1<cycles>": 3}
    assert second.command_index == 3
    assert second.label_cursors == {"A": 0, "B": 0}
    assert second.heap == {}
    assert second_owner.said == ["b"]
    assert first_owner.said == []


def test_failed_script_never_runs_but_others_do(owner):
    broken = Script("broken", "MOVE N\nDANCE", on_error=lambda diagnostic: None)
    healthy = Script("healthy", "SAY \"still here\"")

    broken_context = ScriptContext(broken, FakeOwner())
    healthy_context = ScriptContext(healthy, owner)
    broken_context.send_message("anything")
    broken_context.execute_tick()
    healthy_context.execute_tick()

    assert broken_context.state is ContextState.STOPPED
    assert owner.said == ["still here"]


def test_unknown_command_result_is_a_runtime_fault(owner):
    class Broken(Command):
        def execute(self, owner):
            return "sideways"

    class BrokenScript(Script):
        @property
        def commands(self):
            return (Broken(),)

    context = ScriptContext(BrokenScript("s", "END"), owner)
    with pytest.raises(ScriptRuntimeFault, match="unexpected result"):
        context.execute_tick()


def test_serialize_and_restore_progress(owner, run_script):
    context = run_script(
        """
        :a
        LOCK
        WAIT 3
        :a
        END
        """
    )
    context.zap_label("a")
    context.execute_tick()
    data = context.serialize()
    assert data == {
        "commandIndex": 1,
        "currentLabels": {"A": 1},
        "heap": {"1<cycles>": 2},
        "locked": True,
    }

    restored = ScriptContext(context.script, FakeOwner())
    restored.deserialize(data)
    assert restored.command_index == 1
    assert restored.label_cursors == {"A": 1}
    assert restored.locked
    restored.execute_tick()
    restored.execute_tick()
    assert restored.command_index == 2


def test_options_reject_negative_jump_budget():
    with pytest.raises(ValueError, match="max_jumps_per_tick"):
        ContextOptions(max_jumps_per_tick=-1)
