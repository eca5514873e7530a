"""
Unit tests for pangenome.cli.map_go_via_blast

Tests argument handling, mode dispatch and exit codes of the entry point.
"""
from unittest.mock import patch

import pytest

from pangenome.cli.map_go_via_blast import build_parser, main
from pangenome.exceptions import BlastError, SplitError


@pytest.fixture
def input_fasta(temp_file, sample_fasta_content):
    return temp_file("input.fasta", sample_fasta_content)


class TestBuildParser:
    """Tests for the argument parser."""

    def test_short_flags(self):
        args = build_parser().parse_args([
            "-P", "0000", "-i", "in.fa", "-s", "/db", "-E", "1e-3",
            "-I", "50", "-C", "70", "-n", "-w", "/work", "-g", "go.tab",
        ])

        assert args.project == "0000"
        assert args.input_seqs == "in.fa"
        assert args.search_db == "/db"
        assert args.evalue == "1e-3"
        assert args.percent_id == 50
        assert args.percent_cov == 70
        assert args.use_nuc is True
        assert args.working_dir == "/work"
        assert args.go_map == "go.tab"

    def test_unset_values_are_none(self):
        args = build_parser().parse_args([])
        assert args.evalue is None
        assert args.percent_id is None
        assert args.blast_local is False

    def test_no_abbreviations(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--blast_l"])

    def test_help(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--help"])
        assert exc_info.value.code == 0
        assert "--blast_local" in capsys.readouterr().out


class TestMain:
    """Tests for main."""

    def test_usage_errors(self, input_fasta, temp_dir, capsys):
        """Test that usage errors exit non-zero before anything runs."""
        with patch("pangenome.cli.map_go_via_blast.run_local_blast") as mock_local:
            code = main(["-i", str(input_fasta), "--log_dir", str(temp_dir)])

        assert code == 2
        mock_local.assert_not_called()
        assert "Please specify one of --project, --blast_local, or --blast_file" in capsys.readouterr().out

    def test_two_modes(self, input_fasta, capsys):
        code = main(["-P", "0000", "--blast_local", "-i", str(input_fasta)])

        assert code == 2
        assert "Please specify only one of" in capsys.readouterr().out

    @patch("pangenome.cli.map_go_via_blast.run_grid_blast")
    def test_empty_grid_result(self, mock_grid, input_fasta, temp_dir, capsys):
        """Test that an empty merged result prints 'No results.' and exits 0."""
        empty = temp_dir / "blast_output"
        empty.write_text("")
        mock_grid.return_value = empty

        code = main([
            "-P", "0000", "-i", str(input_fasta),
            "-w", str(temp_dir), "--log_dir", str(temp_dir),
        ])

        assert code == 0
        assert "No results." in capsys.readouterr().out
        config = mock_grid.call_args[0][0]
        assert config.project == "0000"

    @patch("pangenome.cli.map_go_via_blast.run_local_blast")
    def test_local_run_parses_results(self, mock_local, input_fasta, temp_dir, sample_blast_content, capsys):
        result = temp_dir / "blast_output"
        result.write_text(sample_blast_content)
        mock_local.return_value = result

        code = main([
            "--blast_local", "-i", str(input_fasta),
            "-w", str(temp_dir), "--log_dir", str(temp_dir),
        ])

        assert code == 0
        out = capsys.readouterr().out
        assert f"BLAST results at: {result}" in out
        assert "Parsed 4 hits for 3 queries" in out
        assert (temp_dir / "map_go_via_blast.log").exists()

    def test_existing_file_with_go_map(self, input_fasta, temp_dir, temp_file, sample_blast_content):
        """Test file mode skips BLAST and writes GO assignments."""
        blast_file = temp_file("hits.tab", sample_blast_content)
        go_file = temp_file("acc2go.tab", "P60010\tGO:0005524\nP02557\tGO:0005200\n")

        with patch("pangenome.cli.map_go_via_blast.run_local_blast") as mock_local, \
                patch("pangenome.cli.map_go_via_blast.run_grid_blast") as mock_grid:
            code = main([
                "-b", str(blast_file), "-i", str(input_fasta), "-g", str(go_file),
                "-w", str(temp_dir), "--log_dir", str(temp_dir),
            ])

        assert code == 0
        mock_local.assert_not_called()
        mock_grid.assert_not_called()
        lines = (temp_dir / "go_mapping").read_text().splitlines()
        assert [line.split("\t")[:2] for line in lines] == [
            ["orf19.1", "GO:0005524"],
            ["orf19.2", "GO:0005200"],
        ]

    @patch("pangenome.cli.map_go_via_blast.run_local_blast")
    def test_blast_failure(self, mock_local, input_fasta, temp_dir, capsys):
        mock_local.side_effect = BlastError("Problem running blast. See /logs/blast.log")

        code = main(["--blast_local", "-i", str(input_fasta), "-w", str(temp_dir), "--log_dir", str(temp_dir)])

        assert code == 1
        assert "See /logs/blast.log" in capsys.readouterr().out

    @patch("pangenome.cli.map_go_via_blast.run_grid_blast")
    def test_split_failure(self, mock_grid, input_fasta, temp_dir, capsys):
        mock_grid.side_effect = SplitError(
            "Error running split_fasta. It looks like duplicate locus tags are involved.",
            duplicate_ids=True,
        )

        code = main(["-P", "0000", "-i", str(input_fasta), "-w", str(temp_dir), "--log_dir", str(temp_dir)])

        assert code == 1
        assert "duplicate locus tags" in capsys.readouterr().out

    def test_malformed_results(self, input_fasta, temp_dir, temp_file):
        blast_file = temp_file("hits.tab", "not\ttabular\n")

        code = main(["-b", str(blast_file), "-i", str(input_fasta), "-w", str(temp_dir), "--log_dir", str(temp_dir)])

        assert code == 1
