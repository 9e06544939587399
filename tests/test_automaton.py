import pytest

from automaton import (
    Automaton,
    AutomatonError,
    InvalidAutomatonError,
    build,
    render_digraph,
)


class TestBuild:
    def test_normalizes_containers(self):
        aut = build(2, "ab", 0, [1, 1], [[0, 0, 1]], [[1, 0]])

        assert aut.alphabet == ("a", "b")
        assert aut.final_states == frozenset({1})
        assert aut.symbol_transitions == frozenset({(0, 0, 1)})
        assert aut.epsilon_transitions == frozenset({(1, 0)})
        assert aut.num_symbols == 2
        assert list(aut.states) == [0, 1]

    def test_model_is_immutable(self, silent_then_symbol):
        with pytest.raises(AttributeError):
            silent_then_symbol.num_states = 5

    @pytest.mark.parametrize(
        "kwargs",
        [
            dict(num_states=0),
            dict(num_states=-2),
            dict(alphabet=[]),
            dict(alphabet=["a", "a"]),
            dict(initial_state=3),
            dict(initial_state=-1),
            dict(final_states={7}),
            dict(symbol_transitions={(0, 1, 2)}),
            dict(symbol_transitions={(0, 0, 3)}),
            dict(symbol_transitions={(-1, 0, 2)}),
            dict(epsilon_transitions={(0, 3)}),
            dict(epsilon_transitions={(5, 0)}),
        ],
    )
    def test_rejects_invalid_description(self, kwargs):
        args = dict(
            num_states=3,
            alphabet=["a"],
            initial_state=0,
            final_states={2},
            symbol_transitions={(1, 0, 2)},
            epsilon_transitions={(0, 1)},
        )
        args.update(kwargs)

        with pytest.raises(InvalidAutomatonError):
            build(**args)

    def test_error_hierarchy(self):
        with pytest.raises(AutomatonError):
            build(0, ["a"], 0, (), (), ())
        with pytest.raises(ValueError):
            build(0, ["a"], 0, (), (), ())

    def test_direct_construction_is_validated(self):
        with pytest.raises(InvalidAutomatonError):
            Automaton(num_states=1, alphabet=("a",), initial_state=1)


class TestHelpers:
    def test_symbol_index(self, a_star_b_star):
        assert a_star_b_star.symbol_index("a") == 0
        assert a_star_b_star.symbol_index("b") == 1
        with pytest.raises(InvalidAutomatonError):
            a_star_b_star.symbol_index("c")

    def test_targets(self, a_star_b_star):
        assert a_star_b_star.epsilon_targets(1) == frozenset({2})
        assert a_star_b_star.epsilon_targets(3) == frozenset()
        assert a_star_b_star.symbol_targets(1, 0) == frozenset({1})
        assert a_star_b_star.symbol_targets(1, 1) == frozenset()


class TestAccepts:
    @pytest.mark.parametrize(
        "word,expected",
        [("a", True), ("", False), ("aa", False), ("b", False)],
    )
    def test_follows_epsilon_before_symbol(self, silent_then_symbol, word, expected):
        assert silent_then_symbol.accepts(word) is expected

    @pytest.mark.parametrize(
        "word,expected",
        [
            ("", True),
            ("a", True),
            ("aaab", True),
            ("bbb", True),
            ("ab", True),
            ("ba", False),
            ("abc", False),
        ],
    )
    def test_a_star_b_star(self, a_star_b_star, word, expected):
        assert a_star_b_star.accepts(word) is expected

    def test_empty_word_reaches_final_silently(self, silent_to_final):
        assert silent_to_final.accepts("")


class TestParsing:
    def test_key_value_format(self):
        (aut,) = Automaton.from_string(
            """
            # silent move into a symbol move
            states: 3
            alphabet: a
            start: 0
            accept: 2
            1 a 2
            0 eps 1
            """
        )

        assert aut == build(3, ["a"], 0, {2}, {(1, 0, 2)}, {(0, 1)})

    def test_arrow_format_and_epsilon_markers(self):
        (aut,) = Automaton.from_string(
            "states: 3\nalphabet: a b\naccept: 2\n0 -> ε -> 1\n1 -> b -> 2\n2 epsilon 0\n"
        )

        assert aut.symbol_transitions == frozenset({(1, 1, 2)})
        assert aut.epsilon_transitions == frozenset({(0, 1), (2, 0)})

    def test_implicit_alphabet_and_state_count(self):
        (aut,) = Automaton.from_string("accept: 2\n0 b 1\n1 a 2\n")

        assert aut.alphabet == ("b", "a")
        assert aut.num_states == 3
        assert aut.initial_state == 0

    def test_alphabet_symbol_shadows_epsilon_marker(self):
        (aut,) = Automaton.from_string("states: 2\nalphabet: e\naccept: 1\n0 e 1\n")

        assert aut.symbol_transitions == frozenset({(0, 0, 1)})
        assert aut.epsilon_transitions == frozenset()

    @pytest.mark.parametrize("symbol", ["e", "E", "EPS", "Epsilon"])
    def test_only_listed_markers_are_silent(self, symbol):
        (aut,) = Automaton.from_string(f"accept: 2\n0 a 1\n1 {symbol} 2\n")

        assert aut.alphabet == ("a", symbol)
        assert aut.epsilon_transitions == frozenset()
        assert aut.symbol_transitions == frozenset({(0, 0, 1), (1, 1, 2)})

    def test_multiple_blocks(self):
        automata = Automaton.from_string(
            "states: 1\nalphabet: a\n0 a 0\n---\nstates: 2\nalphabet: b\n0 b 1\n"
        )

        assert [a.num_states for a in automata] == [1, 2]

    def test_unknown_symbol_reports_line(self):
        with pytest.raises(InvalidAutomatonError) as excinfo:
            Automaton.from_string("states: 2\nalphabet: a\n0 b 1\n")

        assert excinfo.value.line == 3
        assert "line 3" in str(excinfo.value)

    def test_line_numbers_continue_across_blocks(self):
        with pytest.raises(InvalidAutomatonError) as excinfo:
            Automaton.from_string("states: 1\nalphabet: a\n---\nstates: 1\nbogus\n")

        assert excinfo.value.line == 5

    @pytest.mark.parametrize(
        "content",
        [
            "states: x\nalphabet: a\n",
            "states: 2\nalphabet: a\n0 -> a\n",
            "states: 2\nalphabet: a\nnot a transition line\n",
            "states: 2\nalphabet: a\n0 a 5\n",
        ],
    )
    def test_malformed_content(self, content):
        with pytest.raises(InvalidAutomatonError):
            Automaton.from_string(content)

    def test_load_from_file(self, tmp_path):
        path = tmp_path / "m.txt"
        path.write_text("states: 2\nalphabet: a\naccept: 1\n0 a 1\n", encoding="utf-8")

        (aut,) = Automaton.load_from_file(str(path))

        assert aut.accepts("a")


class TestGraphviz:
    def test_digraph_source(self):
        dot = render_digraph(
            "NFA+ε",
            range(3),
            0,
            {2},
            [(1, "a", 2), (0, None, 1), (1, "b", 2), (2, "a", 2)],
        )

        source = dot.source
        assert "__start__ -> q0" in source
        assert "doublecircle" in source
        assert 'q1 -> q2 [label="a, b"]' in source
        assert "q0 -> q1" in source and "ε" in source
        assert "headport=n" in source

    def test_to_graphviz_renders_png(self, silent_then_symbol, tmp_path, monkeypatch):
        rendered = []
        monkeypatch.setattr(
            "graphviz.Digraph.render",
            lambda self, filename, view, cleanup: rendered.append((filename, view)),
        )

        dot = silent_then_symbol.to_graphviz(str(tmp_path / "m"), view=False)

        assert rendered == [(str(tmp_path / "m"), False)]
        assert dot.format == "png"
