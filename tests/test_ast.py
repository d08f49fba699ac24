import pytest

from glicol.ast import (
    Add,
    Adsr,
    ApfmsGain,
    Arrange,
    Ast,
    Balance,
    Bd,
    Choose,
    CodeBlock,
    ConstSig,
    Delayms,
    Delayn,
    Duration,
    DurationUnit,
    EventInner,
    Eval,
    Get,
    Hh,
    Imp,
    Lpf,
    Meta,
    Mix,
    Mul,
    Noise,
    Onepole,
    Pan,
    Pattern,
    Points,
    PSampler,
    Ref,
    Rhpf,
    Saw,
    Seq,
    Sin,
    Sn,
    Sp,
    Squ,
    TimeList,
    Tri,
)

SINGLE_PARAM = [Delayms, Imp, Tri, Squ, Saw, Onepole, Sin, Mul, Add, Pan, Bd, Sn, Hh]


@pytest.mark.parametrize("cls", SINGLE_PARAM)
def test_single_param_reference(cls):
    assert cls(Ref("~mod")).all_references() == ["~mod"]


def test_single_param_number_has_no_reference():
    components = [
        Delayms(440.0),
        Imp(440.0),
        Tri(440.0),
        Squ(440.0),
        Saw(440.0),
        Onepole(440.0),
        Sin(440.0),
        Mul(440.0),
        Add(440.0),
        Pan(440.0),
        Bd(440.0),
        Sn(440.0),
        Hh(440.0),
    ]
    assert [component.all_references() for component in components] == [[]] * 13


def test_delayn_reference_and_integer():
    assert Delayn(Ref("o")).all_references() == ["o"]
    assert Delayn(8).all_references() == []


def test_components_of_different_kinds_differ():
    assert Sin(440.0) == Sin(440.0)
    assert not Sin(440.0) == Saw(440.0)


def test_seq_references_in_order_with_repeats():
    seq = Seq([(0.0, 60), (1.0, Ref("~a")), (2.0, Ref("~b")), (3.0, Ref("~a"))])
    assert seq.all_references() == ["~a", "~b", "~a"]


def test_seq_accepts_lists_and_compares_equal():
    assert Seq([(0.0, 60)]) == Seq(((0.0, 60),))


def test_arrange_references():
    arrange = Arrange([Ref("~t1"), 3.0, Ref("~t2"), 1.0])
    assert arrange.all_references() == ["~t1", "~t2"]


def test_mix_references_are_its_nodes():
    assert Mix(["~t..", "~drum.."]).all_references() == ["~t..", "~drum.."]


def test_balance_references():
    assert Balance("~llll", "right0").all_references() == ["~llll", "right0"]


def test_get_references():
    assert Get("~x").all_references() == ["~x"]


def test_lpf_references_only_for_ref_signal():
    assert Lpf(Ref("~mod"), 1.0).all_references() == ["~mod"]
    assert Lpf(100.0, 1.0).all_references() == []
    pattern = Pattern(EventInner([(100.0, 0.0), (200.0, 0.5)]))
    assert Lpf(pattern, 1.0).all_references() == []


def test_rhpf_and_apfmsgain_references():
    assert Rhpf(Ref("~c"), 1.0).all_references() == ["~c"]
    assert Rhpf(100.0, 1.0).all_references() == []
    assert ApfmsGain(Ref("~d"), 0.5).all_references() == ["~d"]
    assert ApfmsGain(10.0, 0.5).all_references() == []


@pytest.mark.parametrize(
    "component",
    [
        Choose([60.0, 50.0]),
        ConstSig(1.0),
        Noise(42),
        Sp("\\808"),
        Adsr(0.1, 0.1, 0.5, 0.2),
        Eval(CodeBlock("x")),
        Meta(CodeBlock("y")),
        PSampler(Pattern(EventInner([("'bd'", 0.0)]))),
        Points([(TimeList(0.1), 100.0)]),
    ],
)
def test_components_without_references(component):
    assert component.all_references() == []


def test_pattern_default_span():
    pattern = Pattern(EventInner([(60.0, 0.0)]))
    assert pattern.span == 1.0


def test_event_inner_freezes_pairs():
    event = EventInner([[60.0, 0.0]])
    assert event.val_times == ((60.0, 0.0),)


def test_duration_orders_by_unit_then_value():
    assert Duration(DurationUnit.BAR, 5.0) < Duration(DurationUnit.SECONDS, 1.0)
    assert Duration(DurationUnit.MILLISECONDS, 1.0) < Duration(DurationUnit.MILLISECONDS, 2.0)


def test_time_list_default_has_no_offset():
    assert TimeList(0.5).time is None
    offset = Duration(DurationUnit.MILLISECONDS, -100.0)
    assert TimeList(0.5, offset).time == offset


def test_ast_equality():
    left = Ast({"o": [Saw(440.0), Mul(0.3)]})
    right = Ast({"o": [Saw(440.0), Mul(0.3)]})
    assert left == right
    assert not left == Ast({"o": [Saw(440.0), Mul(Ref("i"))]})


def test_ast_default_is_empty():
    assert Ast().nodes == {}


def test_components_are_immutable():
    sin = Sin(440.0)
    with pytest.raises(AttributeError):
        sin.param = 220.0
    assert sin.param == 440.0