"""
Tests for the sequencer: work-list scheduling, numbering, summary, and
the end-to-end properties of a run.
"""

from pathlib import Path

import pytest

from gitseq.adapters.mock import MockVcsAdapter
from gitseq.core.engine.sequencer import RunReport, Sequencer, StartCommitError
from gitseq.core.models.config import SequencerConfig
from gitseq.core.models.sequence import PendingSubSequence
from gitseq.core.persistence.summary import read_summary

from helpers import DIAMOND, NESTED, OCTOPUS, TWO_ROOTS, all_paths, read_lines, sequence_files

REPO = Path("/repo")


def _run(graph: dict[str, list[str]], start: str, output_dir: Path, **config) -> RunReport:
    sequencer = Sequencer(
        MockVcsAdapter(graph), REPO, start, output_dir, SequencerConfig(**config)
    )
    return sequencer.run()


class TestInitialize:
    def test_missing_start_commit_raises(self, output_dir: Path):
        with pytest.raises(StartCommitError, match="not available"):
            Sequencer(MockVcsAdapter(DIAMOND), REPO, "nope", output_dir)

    def test_missing_start_commit_writes_nothing(self, output_dir: Path):
        with pytest.raises(StartCommitError):
            Sequencer(MockVcsAdapter(DIAMOND), REPO, "nope", output_dir)
        assert list(output_dir.iterdir()) == []

    def test_blank_start_commit_raises(self, output_dir: Path):
        with pytest.raises(StartCommitError):
            Sequencer(MockVcsAdapter(DIAMOND), REPO, "  ", output_dir)

    def test_nothing_written_before_run(self, output_dir: Path):
        sequencer = Sequencer(MockVcsAdapter(DIAMOND), REPO, "C", output_dir)
        assert sequencer.start_commit == "C"
        assert list(output_dir.iterdir()) == []


class TestDiamondScenarios:
    def test_start_at_merge(self, output_dir: Path):
        report = _run(DIAMOND, "C", output_dir)

        files = sequence_files(output_dir)
        assert len(files) == 2
        contents = sorted(read_lines(f) for f in files)
        assert contents == [["C", "B1", "A"], ["C", "B2", "A"]]

        summary = read_lines(output_dir / "sequences_summary.csv")
        assert len(summary) == 2
        assert all(line.endswith(",3") for line in summary)
        assert report.total == 2
        assert report.status == "ok"

    def test_first_parent_gets_first_sequence(self, output_dir: Path):
        _run(DIAMOND, "C", output_dir)
        assert read_lines(output_dir / "CommitSequence_1.txt") == ["C", "B1", "A"]
        assert read_lines(output_dir / "CommitSequence_2.txt") == ["C", "B2", "A"]

    def test_start_below_merge(self, output_dir: Path):
        report = _run(DIAMOND, "B2", output_dir)

        files = sequence_files(output_dir)
        assert [read_lines(f) for f in files] == [["B2", "A"]]
        summary = read_lines(output_dir / "sequences_summary.csv")
        assert summary == ["CommitSequence_1,2"]
        assert report.total == 1

    def test_root_start_commit(self, output_dir: Path):
        report = _run(DIAMOND, "A", output_dir)
        assert [read_lines(f) for f in sequence_files(output_dir)] == [["A"]]
        assert report.total_commits == 1


class TestPathEnumeration:
    @pytest.mark.parametrize(
        ("graph", "start"),
        [
            (DIAMOND, "C"),
            (NESTED, "M2"),
            (NESTED, "M1"),
            (OCTOPUS, "O"),
            (TWO_ROOTS, "M"),
        ],
    )
    def test_matches_recursive_oracle(self, graph, start, output_dir: Path):
        report = _run(graph, start, output_dir)
        expected = sorted(all_paths(graph, start))

        produced = sorted(read_lines(f) for f in sequence_files(output_dir))
        assert produced == expected
        assert report.total == len(expected)

    def test_every_sequence_ends_at_a_root(self, output_dir: Path):
        _run(NESTED, "M2", output_dir)
        roots = {c for c, parents in NESTED.items() if not parents}
        for f in sequence_files(output_dir):
            assert read_lines(f)[-1] in roots

    def test_small_cache_same_result(self, tmp_path: Path):
        big, small = tmp_path / "big", tmp_path / "small"
        big.mkdir()
        small.mkdir()
        _run(NESTED, "M2", big)
        _run(NESTED, "M2", small, cache_capacity=1)
        assert [read_lines(f) for f in sequence_files(big)] == [
            read_lines(f) for f in sequence_files(small)
        ]


class TestPrefixSharing:
    def test_child_prefix_matches_parent_prefix(self, output_dir: Path):
        _run(DIAMOND, "C", output_dir)
        parent = (output_dir / "CommitSequence_1.txt").read_bytes()
        child = (output_dir / "CommitSequence_2.txt").read_bytes()
        assert parent.startswith(b"C\n")
        assert child.startswith(b"C\n")

    def test_nested_branch_replays_its_own_parent(self, output_dir: Path):
        # Sequence 1: M2 M1 P R; 2: M2 X Q R (branch at M2);
        # 3: M2 M1 Q R (branch at M1); 4: M2 X Q S; 5: M2 M1 Q S
        report = _run(NESTED, "M2", output_dir)
        by_name = {s.name: read_lines(s.path) for s in report.sequences}
        assert by_name["CommitSequence_1"] == ["M2", "M1", "P", "R"]
        assert by_name["CommitSequence_2"] == ["M2", "X", "Q", "R"]
        assert by_name["CommitSequence_3"] == ["M2", "M1", "Q", "R"]
        for seq in report.sequences[1:]:
            assert seq.inherited


class TestNumberingAndSummary:
    def test_numbers_strictly_increasing(self, output_dir: Path):
        report = _run(NESTED, "M2", output_dir)
        numbers = [s.number for s in report.sequences]
        assert numbers == list(range(1, report.total + 1))

    def test_summary_counts_match_artifacts(self, output_dir: Path):
        _run(NESTED, "M2", output_dir)
        records = read_summary(output_dir / "sequences_summary.csv")
        assert len(records) == len(sequence_files(output_dir))
        for record in records:
            artifact = output_dir / f"{record.sequence_name}.txt"
            assert record.commit_count == len(read_lines(artifact))

    def test_summary_order_is_completion_order(self, output_dir: Path):
        report = _run(OCTOPUS, "O", output_dir)
        records = read_summary(output_dir / "sequences_summary.csv")
        assert [r.sequence_name for r in records] == [s.name for s in report.sequences]

    def test_custom_file_names(self, output_dir: Path):
        _run(
            DIAMOND,
            "C",
            output_dir,
            sequence_file_prefix="seq-",
            sequence_file_suffix=".lst",
            summary_file="index.csv",
        )
        assert sorted(p.name for p in output_dir.iterdir()) == ["index.csv", "seq-1.lst", "seq-2.lst"]
        assert read_lines(output_dir / "index.csv") == ["seq-1,3", "seq-2,3"]


class TestScheduling:
    def test_add_queues_work(self, output_dir: Path):
        sequencer = Sequencer(MockVcsAdapter(DIAMOND), REPO, "C", output_dir)
        sequencer.add(PendingSubSequence(
            branch_commit="B2",
            parent_artifact=output_dir / "CommitSequence_1.txt",
            branch_point="C",
        ))
        assert sequencer.pending == 1

    def test_work_list_drained(self, output_dir: Path):
        sequencer = Sequencer(MockVcsAdapter(NESTED), REPO, "M2", output_dir)
        report = sequencer.run()
        assert sequencer.pending == 0
        assert sequencer.sequences_created == report.total

    def test_run_only_once(self, output_dir: Path):
        sequencer = Sequencer(MockVcsAdapter(DIAMOND), REPO, "C", output_dir)
        sequencer.run()
        with pytest.raises(RuntimeError):
            sequencer.run()

    def test_long_history_does_not_recurse(self, output_dir: Path):
        depth = 5000
        graph = {f"c{i}": [f"c{i - 1}"] for i in range(1, depth)}
        graph["c0"] = []
        report = _run(graph, f"c{depth - 1}", output_dir, cache_capacity=100)
        assert report.total == 1
        assert report.total_commits == depth

    def test_many_merges(self, output_dir: Path):
        # A ladder of 8 diamonds doubles the path count each step
        graph: dict[str, list[str]] = {"r": []}
        below = "r"
        for i in range(8):
            graph[f"a{i}"] = [below]
            graph[f"b{i}"] = [below]
            graph[f"m{i}"] = [f"a{i}", f"b{i}"]
            below = f"m{i}"
        report = _run(graph, below, output_dir)
        assert report.total == 2 ** 8
        assert len({tuple(read_lines(s.path)) for s in report.sequences}) == 2 ** 8


class TestIdempotence:
    def test_rerun_produces_same_sequences(self, tmp_path: Path):
        first, second = tmp_path / "first", tmp_path / "second"
        first.mkdir()
        second.mkdir()
        _run(NESTED, "M2", first)
        _run(NESTED, "M2", second)

        assert sorted(p.name for p in first.iterdir()) == sorted(p.name for p in second.iterdir())
        for path in first.iterdir():
            assert path.read_bytes() == (second / path.name).read_bytes()


class TestFailures:
    def test_query_failure_truncates_one_sequence(self, output_dir: Path):
        vcs = MockVcsAdapter(DIAMOND)
        vcs.set_failure("B2", "fatal: unable to read")
        report = Sequencer(vcs, REPO, "C", output_dir).run()

        assert report.total == 2
        assert report.truncated == 1
        assert report.status == "partial"
        truncated = next(s for s in report.sequences if s.status == "truncated")
        assert read_lines(truncated.path) == ["C", "B2"]
        assert truncated.commit_count == 2

    def test_failure_does_not_stop_other_sequences(self, output_dir: Path):
        vcs = MockVcsAdapter(OCTOPUS)
        vcs.set_failure("P2")
        report = Sequencer(vcs, REPO, "O", output_dir).run()
        assert report.total == 3
        assert [s.status for s in report.sequences] == ["ok", "truncated", "ok"]

    def test_summary_still_written_for_truncated(self, output_dir: Path):
        vcs = MockVcsAdapter(DIAMOND)
        vcs.set_failure("B1")
        Sequencer(vcs, REPO, "C", output_dir).run()
        records = read_summary(output_dir / "sequences_summary.csv")
        assert [(r.sequence_name, r.commit_count) for r in records] == [
            ("CommitSequence_1", 2),
            ("CommitSequence_2", 3),
        ]


class TestRunReport:
    def test_shortest_and_longest(self, output_dir: Path):
        graph = {"M": ["A", "B"], "A": ["A0"], "A0": [], "B": []}
        report = _run(graph, "M", output_dir)
        assert report.longest.name == "CommitSequence_1"
        assert report.shortest.name == "CommitSequence_2"

    def test_empty_report(self):
        report = RunReport()
        assert report.total == 0
        assert report.shortest is None
        assert report.longest is None

    def test_to_dict(self, output_dir: Path):
        report = _run(DIAMOND, "C", output_dir)
        data = report.to_dict()
        assert data["status"] == "ok"
        assert data["total"] == 2
        assert data["total_commits"] == 6
        assert data["start_commit"] == "C"
        assert len(data["sequences"]) == 2
        assert data["sequences"][1]["inherited"] is True
