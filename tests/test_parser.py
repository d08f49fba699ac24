import pytest

from glicol.ast import (
    Arrange, Ast, Adc, Balance, Bd, Choose, ConstSig, Delayms, Delayn, Duration,
    DurationUnit, Lpf, Mix, Pattern, EventInner, Points, Ref, SawSynth, Saw, Seq,
    Sin, Sn, Sp, Speed, Squ, SquSynth, TimeList, TriSynth, Eval, CodeBlock, Mul,
)
from glicol.errors import ParseError, Rule
from glicol.parser import get_ast


def one(name, *components):
    return Ast(nodes={name: list(components)})


def test_delay():
    assert get_ast("o: delayn 8") == one("o", Delayn(8))
    assert get_ast("o: delayn o") == one("o", Delayn(Ref("o")))
    with pytest.raises(ParseError) as info:
        get_ast("o: delayn 0.5")
    assert info.value.positives == [Rule.INTEGER]
    assert get_ast("o: delayms 0.5") == one("o", Delayms(0.5))
    assert get_ast("o: delayms 5") == one("o", Delayms(5.0))
    assert get_ast("o: delayms o") == one("o", Delayms(Ref("o")))


def test_waves():
    assert get_ast("o: sin 0.5") == one("o", Sin(0.5))
    assert get_ast("o: sin i") == one("o", Sin(Ref("i")))
    assert get_ast("o: squ 1100.5") == one("o", Squ(1100.5))
    assert get_ast("o: squ suq") == one("o", Squ(Ref("suq")))
    assert get_ast("o: saw 00.5") == one("o", Saw(0.5))
    assert get_ast("o: saw ooooo") == one("o", Saw(Ref("ooooo")))


def test_seq():
    ast = get_ast("o: seq 60_ 1000_ 1010__10 _1010_1011_ 1_1_ ~a12_13_ ~r4 4")
    assert ast == one("o", Seq((
        (0.0, 60), (1.0, 1000), (2.0, 1010), (2.75, 10), (3.2, 1010), (3.6, 1011),
        (4.0, 1), (4.5, 1), (5.0, Ref("~a")), (5.2, 12), (5.6, 13),
        (6.0, Ref("~r")), (6.5, 4), (7.0, 4),
    )))


def test_arrange():
    assert get_ast("o: arrange ~o 1") == one("o", Arrange((Ref("~o"), 1.0)))
    assert get_ast("o: arrange ~t1 3 ~t2 1") == one(
        "o", Arrange((Ref("~t1"), 3.0, Ref("~t2"), 1.0))
    )


def test_choose():
    assert get_ast("~a: choose 42 42 42 42 42 37 0 0 0 0") == one(
        "~a", Choose([42.0] * 5 + [37.0] + [0.0] * 4)
    )
    assert get_ast("o: choose 52") == one("o", Choose([52.0]))


def test_mix():
    assert get_ast("out: mix ~bd ~sn ~hh ~lead ~basslow ~bassmid") == one(
        "out", Mix(["~bd", "~sn", "~hh", "~lead", "~basslow", "~bassmid"])
    )
    assert get_ast("out: mix ~t.. ~drum..") == one("out", Mix(["~t..", "~drum.."]))


def test_sp():
    assert get_ast("o: sp \\808db") == one("o", Sp("\\808db"))
    assert get_ast("o: sp \\guitar") == one("o", Sp("\\guitar"))


def test_speed_sig_adc():
    assert get_ast("a: speed 16.0") == one("a", Speed(16.0))
    assert get_ast("fhhfh: sig 4.0") == one("fhhfh", ConstSig(4.0))
    assert get_ast("oo_: constsig 5.111") == one("oo_", ConstSig(5.111))
    assert get_ast("b_b: adc 5") == one("b_b", Adc(5))


def test_bd_sn():
    assert get_ast("~bd: bd 0.03") == one("~bd", Bd(0.03))
    assert get_ast("~ssss: sn 0.05") == one("~ssss", Sn(0.05))


def test_synths():
    assert get_ast("synthy: sawsynth 0.01 0.3") == one("synthy", SawSynth(0.01, 0.3))
    assert get_ast("q: squsynth 1.000 300") == one("q", SquSynth(1.0, 300.0))
    assert get_ast("i01: trisynth 0.00 9.9") == one("i01", TriSynth(0.0, 9.9))


def test_lpf():
    assert get_ast("~l: lpf ~mod 1.0") == one("~l", Lpf(Ref("~mod"), 1.0))
    assert get_ast("ooo: lpf 100.0 1.0") == one("ooo", Lpf(100.0, 1.0))
    assert get_ast('o: lpf "400@0.5 600@0.9"(1) 1') == one(
        "o", Lpf(Pattern(EventInner(((400.0, 0.5), (600.0, 0.9))), 1.0), 1.0)
    )


def test_balance():
    assert get_ast("o0: balance ~llll right0") == one("o0", Balance("~llll", "right0"))


def test_points():
    ast = get_ast("a: [0.1 => 0.2, 1/2 - 100_ms => 0.3]")
    assert ast == one("a", Points((
        (TimeList(0.1), 0.2),
        (TimeList(0.5, Duration(DurationUnit.MILLISECONDS, -100.0)), 0.3),
    )))
    looping = get_ast("o: [0.1=>100, 1/4=> 10.0]*(1/2)..").nodes["o"][0]
    assert looping.span == 0.5 and looping.is_looping


def test_eval_code():
    assert get_ast("o: eval `x:=1;x`") == one("o", Eval(CodeBlock("x:=1;x")))


def test_minimal_and_comments():
    assert get_ast("o: sin 440") == one("o", Sin(440.0))
    assert get_ast("o: sin 440\n    // >> mul 0.5\n    >> mul 0.6") == one(
        "o", Sin(440.0), Mul(0.6)
    )
    ast = get_ast("o: sin 440\n// ooooh this is nonsense\n>> add 6.00")
    assert len(ast.nodes["o"]) == 2


def test_unknown_node_and_missing_argument():
    with pytest.raises(ParseError) as info:
        get_ast("o: wobble 3")
    assert Rule.SIN in info.value.positives
    with pytest.raises(ParseError) as info:
        get_ast("o: sawsynth 0.1")
    assert info.value.positives == [Rule.NUMBER]