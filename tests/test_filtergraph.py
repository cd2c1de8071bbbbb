"""Tests for FilterGraphBuilder."""

import pytest

from scenereel.filtergraph import FilterGraphBuilder, filter_expr


class TestFilterExpr:
    def test_bare_name(self):
        assert filter_expr("anull") == "anull"

    def test_positional_and_keyword(self):
        assert filter_expr("adelay", "500|500") == "adelay=500|500"
        assert filter_expr("concat", n=2, v=1, a=0) == "concat=n=2:v=1:a=0"


class TestFilterGraphBuilder:
    def test_generated_labels(self):
        graph = FilterGraphBuilder()
        out = graph.add(["0:v", "1:v"], "xfade=transition=fade:duration=0.5:offset=4.5")
        graph.add([out], "scale=1280:720", outputs=["vout"])
        assert graph.render() == (
            "[0:v][1:v]xfade=transition=fade:duration=0.5:offset=4.5[f0];"
            "[f0]scale=1280:720[vout]"
        )

    def test_multiple_filters_in_one_chain(self):
        graph = FilterGraphBuilder()
        graph.add(["1:a"], "asetpts=PTS-STARTPTS", "adelay=10|10", outputs=["a1"])
        assert graph.render() == "[1:a]asetpts=PTS-STARTPTS,adelay=10|10[a1]"

    def test_source_chain_without_inputs(self):
        graph = FilterGraphBuilder()
        graph.add([], "anullsrc=r=44100:cl=stereo", outputs=["aout"])
        assert graph.render() == "anullsrc=r=44100:cl=stereo[aout]"

    def test_duplicate_output_label_rejected(self):
        graph = FilterGraphBuilder()
        graph.add(["0:v"], "null", outputs=["v"])
        with pytest.raises(ValueError, match="already used"):
            graph.add(["0:v"], "null", outputs=["v"])

    def test_label_hint_avoids_collisions(self):
        graph = FilterGraphBuilder()
        graph.add(["0:v"], "null", outputs=["v"])
        fresh = graph.label("v")
        assert fresh != "v"
        graph.add(["v"], "null", outputs=[fresh])

    def test_invalid_label_rejected(self):
        graph = FilterGraphBuilder()
        with pytest.raises(ValueError, match="Invalid filter pad label"):
            graph.add(["0:v];[evil"], "null")

    def test_chain_needs_a_filter(self):
        with pytest.raises(ValueError, match="at least one filter"):
            FilterGraphBuilder().add(["0:v"])

    def test_empty_graph_cannot_render(self):
        with pytest.raises(ValueError, match="empty"):
            FilterGraphBuilder().render()

    def test_len_counts_chains(self):
        graph = FilterGraphBuilder()
        graph.add(["0:v"], "null")
        graph.add(["1:v"], "null")
        assert len(graph) == 2
