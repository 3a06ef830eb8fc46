import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

import main


class TestMain:
    def test_writes_sorted_accounts(self, tmp_path, capsys):
        csv_file = tmp_path / "test.csv"
        csv_file.write_text('\n'.join([
            "type, client, tx, amount",
            "deposit, 2, 1, 2.0",
            "deposit, 1, 2, 1.0",
            "deposit, 1, 3, 2.0",
            "withdrawal, 1, 4, 1.5",
            "withdrawal, 2, 5, 3.0",
        ]))

        assert main.main([str(csv_file)]) == 0

        out = capsys.readouterr().out
        assert out.splitlines() == [
            "client,available,held,total,locked",
            "1,1.5000,0.0000,1.5000,false",
            "2,2.0000,0.0000,2.0000,false",
        ]

    def test_missing_argument(self, capsys):
        assert main.main([]) == 1

        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Usage" in captured.err

    def test_too_many_arguments(self, capsys):
        assert main.main(["a.csv", "b.csv"]) == 1
        assert "Usage" in capsys.readouterr().err

    def test_reads_sys_argv_by_default(self, tmp_path, capsys, monkeypatch):
        csv_file = tmp_path / "test.csv"
        csv_file.write_text("type,client,tx,amount\ndeposit,1,1,3\n")
        monkeypatch.setattr(sys, "argv", ["payments-ledger", str(csv_file)])

        assert main.main() == 0
        assert "1,3.0000,0.0000,3.0000,false" in capsys.readouterr().out

    def test_missing_file(self, tmp_path, capsys):
        assert main.main([str(tmp_path / "missing.csv")]) == 1
        assert capsys.readouterr().out == ""

    def test_malformed_record_aborts_without_output(self, tmp_path, capsys):
        csv_file = tmp_path / "test.csv"
        csv_file.write_text('\n'.join([
            "type, client, tx, amount",
            "deposit, 1, 1, 1.0",
            "deposit, 1, 2, not-a-number",
        ]))

        assert main.main([str(csv_file)]) == 1
        assert capsys.readouterr().out == ""

    def test_large_balance_is_written(self, tmp_path, capsys):
        csv_file = tmp_path / "test.csv"
        csv_file.write_text("type,client,tx,amount\ndeposit,1,1,100000000000000000000000000\n")

        assert main.main([str(csv_file)]) == 0
        assert capsys.readouterr().out.splitlines()[1] == (
            "1,100000000000000000000000000.0000,0.0000,100000000000000000000000000.0000,false"
        )

    def test_unreadable_csv_field_exits_cleanly(self, tmp_path, capsys):
        csv_file = tmp_path / "test.csv"
        csv_file.write_text("type,client,tx,amount\ndeposit,1,1," + "1" * 200000 + "\n")

        assert main.main([str(csv_file)]) == 1
        assert capsys.readouterr().out == ""

    def test_underscore_separated_number_rejected(self, tmp_path, capsys):
        csv_file = tmp_path / "test.csv"
        csv_file.write_text("type,client,tx,amount\ndeposit,1_0,1,1_0\n")

        assert main.main([str(csv_file)]) == 1
        assert capsys.readouterr().out == ""
