"""Integration tests for end-to-end workflows."""

from cashflow.cli.main import cli


def test_full_workflow(cli_runner, temp_db, tmp_path, xlsx_bytes, cashflow_sheet_rows):
    """Test complete workflow: import → categorize → add → report → simulate."""
    db = ["--db-path", temp_db.database_path]

    # Step 1: Import last year's sheet
    sheet = tmp_path / "flujo.xlsx"
    sheet.write_bytes(xlsx_bytes(cashflow_sheet_rows))
    result = cli_runner.invoke(cli, db + ["import", str(sheet), "--commit"])
    assert result.exit_code == 0
    assert "Imported: 7 transactions" in result.output

    # Step 2: Imported categories are company level; add a personal one
    result = cli_runner.invoke(
        cli,
        db + ["category", "create", "Gimnasio", "--level", "personal", "--sublevel", "deporte"],
    )
    assert result.exit_code == 0

    result = cli_runner.invoke(cli, db + ["category", "list", "--type", "expense"])
    assert result.exit_code == 0
    for name in ("Oficina", "Software", "Gimnasio"):
        assert name in result.output

    # Step 3: Add a projected personal expense and an installment plan
    result = cli_runner.invoke(
        cli,
        db + [
            "add", "--date", "2024-04-01", "--amount", "60",
            "--category", "gimnasio", "--projected", "--pending",
        ],
    )
    assert result.exit_code == 0

    result = cli_runner.invoke(
        cli,
        db + [
            "add", "--date", "2024-04-15", "--amount", "900",
            "--category", "Software", "--installments", "3",
        ],
    )
    assert result.exit_code == 0

    # Step 4: Reports
    result = cli_runner.invoke(cli, db + ["summary", "--year", "2024"])
    assert result.exit_code == 0
    assert "Cash flow 2024" in result.output

    result = cli_runner.invoke(cli, db + ["summary", "--year", "2024", "--origin", "personal"])
    assert result.exit_code == 0
    assert "$60.00" in result.output

    result = cli_runner.invoke(cli, db + ["categories-report", "--year", "2024", "--type", "expense"])
    assert result.exit_code == 0
    assert "Gimnasio" in result.output
    assert "300*" in result.output

    result = cli_runner.invoke(cli, db + ["metrics", "--year", "2024", "--focus", "personal"])
    assert result.exit_code == 0
    assert "Runway:" in result.output

    result = cli_runner.invoke(cli, db + ["clients", "--year", "2024"])
    assert result.exit_code == 0
    assert "Consultoría" in result.output

    # Step 5: Roll the year forward and simulate
    result = cli_runner.invoke(cli, db + ["copy-year", "2024", "2025"])
    assert result.exit_code == 0
    assert "Copied 11 transaction(s)" in result.output

    result = cli_runner.invoke(
        cli, db + ["simulate", "--year", "2025", "--add-income", "2025-02-01:5000:Nuevo cliente"]
    )
    assert result.exit_code == 0
    assert "Scenario 2025" in result.output

    # Step 6: Re-importing the same sheet finds only duplicates
    result = cli_runner.invoke(cli, db + ["import", str(sheet)])
    assert result.exit_code == 0
    assert "Potential duplicates: 7" in result.output
