"""
Unit tests for pangenome.cli.split_fasta
"""
from pangenome.cli.split_fasta import main
from pangenome.utils.fasta import DUPLICATE_ID_SIGNATURE


class TestSplitFastaMain:
    """Tests for the split-fasta entry point."""

    def test_splits_input(self, temp_dir, temp_file, sample_fasta_content):
        fasta = temp_file("in.fasta", sample_fasta_content)
        out_dir = temp_dir / "out"

        code = main(["-f", str(fasta), "-n", "2", "-o", str(out_dir)])

        assert code == 0
        assert sorted(p.name for p in out_dir.iterdir()) == ["split_fasta.1", "split_fasta.2"]

    def test_duplicate_ids_reported_on_stderr(self, temp_dir, temp_file, capsys):
        fasta = temp_file("in.fasta", ">a\nMK\n>a\nMK\n")

        code = main(["-f", str(fasta), "-n", "1", "-o", str(temp_dir / "out")])

        assert code == 1
        assert DUPLICATE_ID_SIGNATURE in capsys.readouterr().err

    def test_missing_input(self, temp_dir, capsys):
        code = main(["-f", str(temp_dir / "none.fasta"), "-o", str(temp_dir / "out")])

        assert code == 1
        assert "does not exist" in capsys.readouterr().err

    def test_bad_chunk_size(self, temp_file, temp_dir, sample_fasta_content):
        fasta = temp_file("in.fasta", sample_fasta_content)
        assert main(["-f", str(fasta), "-n", "0", "-o", str(temp_dir / "out")]) == 1
