from geant_assistant.rag.context import assemble_context, extract_sources
from geant_assistant.retrieval.models import SourceRef

from conftest import make_result


class TestAssembleContext:
    def test_empty_results_give_none(self):
        assert assemble_context([]) is None

    def test_blocks_follow_rank_order(self, eduroam_results):
        context = assemble_context(eduroam_results)

        blocks = context.split("\n\n")
        assert len(blocks) == 3
        assert blocks[0].startswith("[Source 1] Title: eduroam Service Definition")
        assert "Content: eduroam is the secure roaming access service." in blocks[0]
        assert blocks[1].startswith("[Source 2] Title: eduroam Service Definition")
        assert "national roaming operator" in blocks[1]
        assert blocks[2].startswith("[Source 3] Title: Campus Network Best Practices")
        assert all(block.endswith("---") for block in blocks)

    def test_title_falls_back_to_file_name(self):
        context = assemble_context([make_result("X", 0.9, file_name="report.pdf", content="c")])
        assert context.startswith("[Source 1] Title: report.pdf")


class TestExtractSources:
    def test_empty_results_give_no_sources(self):
        assert extract_sources([]) == []

    def test_duplicates_collapse_to_first_seen(self, eduroam_results):
        sources = extract_sources(eduroam_results)

        assert sources == [
            SourceRef(
                title="eduroam Service Definition",
                authors="GÉANT Project",
                url="https://zenodo.org/records/1",
                doi="10.5281/zenodo.1",
            ),
            SourceRef(title="Campus Network Best Practices"),
        ]

    def test_truncates_at_three_unique_works(self):
        results = [
            make_result(rid, score, title=f"Doc {rid}")
            for rid, score in [("A", 0.9), ("B", 0.8), ("B", 0.7), ("C", 0.6), ("D", 0.5)]
        ]
        sources = extract_sources(results)

        assert [s.title for s in sources] == ["Doc A", "Doc B", "Doc C"]

    def test_no_two_sources_share_a_record(self):
        results = [make_result(i % 2, 0.9 - i * 0.1, title=f"Doc {i % 2}") for i in range(6)]
        sources = extract_sources(results)

        assert len(sources) == 2
        assert len({s.title for s in sources}) == 2

    def test_output_is_deterministic(self, eduroam_results):
        assert extract_sources(eduroam_results) == extract_sources(eduroam_results)

    def test_title_falls_back_to_file_name(self):
        sources = extract_sources([make_result("X", 0.9, file_name="D5.1.pdf")])
        assert sources[0].title == "D5.1.pdf"

    def test_zenodo_url_payload_field_maps_to_url(self):
        result = make_result("Z", 0.7, title="T", zenodo_url="https://zenodo.org/records/9")
        assert extract_sources([result])[0].url == "https://zenodo.org/records/9"
