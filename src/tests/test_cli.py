"""
Tests for the command-line interface.
"""

import json

import pytest

from glyphscope.cli import (
    format_chars,
    load_documents,
    main,
    parse_config,
    parse_files,
    parse_property_matching,
    parse_top,
    print_summary,
)
from glyphscope.errors import InvalidArgumentError, RangeError
from glyphscope.metrics import TextAnalysis, analyze_text


# ===== CONFIG PARSING TESTS =====


def test_parse_config_defaults():
    config = parse_config(["text=hello"])

    assert config["text"] == "hello"
    assert config["files"] == []
    assert config["granularity"] == "main"
    assert config["format"] == "table"
    assert config["output"] is None
    assert config["property_matching"] is None
    assert config["encoding"] == "utf-8"


def test_parse_config_coerces_text_to_string():
    assert parse_config(["text=123"])["text"] == "123"


def test_parse_config_merges_yaml_file(tmp_path):
    config_file = tmp_path / "glyphscope.yaml"
    config_file.write_text("text: from-file\ngranularity: sub\ntop: 3\n", encoding="utf-8")

    config = parse_config([f"config={config_file}", "granularity=main"])
    assert config["text"] == "from-file"
    assert config["granularity"] == "main"  # CLI wins over file
    assert config["top"] == 3


def test_parse_config_missing_file_raises_runtime_error(tmp_path):
    with pytest.raises(RuntimeError):
        parse_config([f"config={tmp_path / 'missing.yaml'}"])


@pytest.mark.parametrize(
    "files,expected",
    [
        (None, []),
        ("", []),
        ("a.txt", ["a.txt"]),
        ("a.txt, b.txt,", ["a.txt", "b.txt"]),
        (["a.txt", "b.txt"], ["a.txt", "b.txt"]),
    ],
)
def test_parse_files(files, expected):
    assert parse_files(files) == expected


@pytest.mark.parametrize(
    "value,expected",
    [(None, None), (True, True), (False, False), ("auto", None), ("AUTO", None)],
)
def test_parse_property_matching(value, expected):
    assert parse_property_matching(value) is expected


def test_parse_property_matching_rejects_unknown():
    with pytest.raises(RangeError):
        parse_property_matching("sometimes")


@pytest.mark.parametrize("value,expected", [(None, None), (1, 1), (5, 5), ("3", 3)])
def test_parse_top(value, expected):
    assert parse_top(value) == expected


@pytest.mark.parametrize("value", [0, -1, "abc", True])
def test_parse_top_rejects_invalid(value):
    with pytest.raises(InvalidArgumentError):
        parse_top(value)


# ===== OUTPUT TESTS =====


def test_format_chars_escapes_invisible():
    assert format_chars(["a", " ", "\t"]) == "a U+0020 U+0009"
    assert format_chars(list("abcdefghij"), limit=3) == "a b c …"


def test_print_summary(capsys):
    print_summary(analyze_text("Hello 가😊"))
    out = capsys.readouterr().out

    assert "8 characters" in out
    lines = out.splitlines()
    latin_line = next(line for line in lines if "Latin" in line)
    assert "62.50%" in latin_line
    assert lines.index(latin_line) < next(
        i for i, line in enumerate(lines) if "Hangul" in line
    )


def test_print_summary_top(capsys):
    print_summary(analyze_text("aaab1"), top=1)
    out = capsys.readouterr().out
    assert "Latin" in out
    assert "Digit" not in out


def test_print_summary_empty(capsys):
    print_summary(TextAnalysis())
    assert "No characters" in capsys.readouterr().out


# ===== MAIN TESTS =====


def test_main_table(capsys):
    main(["text=Hello 가😊"])
    out = capsys.readouterr().out

    assert "🚀 Starting glyphscope" in out
    assert "Latin" in out
    assert "✅ Analysis completed successfully!" in out


def test_main_json_keeps_stdout_clean(capsys):
    main(["text=Hello 가😊", "format=json"])
    captured = capsys.readouterr()

    data = json.loads(captured.out)
    assert data["total"] == 8
    assert data["breakdown"]["Latin"]["chars"] == ["H", "e", "l", "o"]
    assert "Starting glyphscope" in captured.err


def test_main_csv(capsys):
    main(["text=aab", "format=csv", "granularity=sub"])
    out = capsys.readouterr().out
    assert out.splitlines()[0] == "label,count,ratio,distinct,chars"
    assert "Latin:Lowercase,3,100.0,2,ab" in out


def test_main_files_and_output(tmp_path, capsys):
    first = tmp_path / "a.txt"
    second = tmp_path / "b.txt"
    first.write_text("ab", encoding="utf-8")
    second.write_text("c1", encoding="utf-8")
    output = tmp_path / "stats.json"

    main([f"files={first},{second}", f"output={output}"])
    out = capsys.readouterr().out

    assert "Inputs (2)" in out
    assert "💾 Results saved" in out
    data = json.loads(output.read_text(encoding="utf-8"))
    assert data["total"] == 4
    assert data["breakdown"]["Latin"] == {
        "count": 3,
        "ratio": 75.0,
        "chars": ["a", "b", "c"],
    }


def test_main_without_properties(capsys):
    main(["text=中α", "property_matching=false", "format=json"])
    captured = capsys.readouterr()

    data = json.loads(captured.out)
    assert set(data["breakdown"]) == {"Han Ideograph", "Other"}
    assert "property matching unavailable" in captured.err


def test_main_requires_input(capsys):
    with pytest.raises(SystemExit) as exc_info:
        main([])
    assert exc_info.value.code == 1
    assert "text or files is required" in capsys.readouterr().out


def test_load_documents_exits_without_input(capsys):
    config = parse_config(["granularity=sub"])
    with pytest.raises(SystemExit) as exc_info:
        load_documents(config)
    assert exc_info.value.code == 1
    assert "Examples:" in capsys.readouterr().out


@pytest.mark.parametrize(
    "args,message",
    [
        (["text=x", "granularity=word"], "granularity must be one of"),
        (["text=x", "format=xml"], "format must be one of"),
        (["text=x", "top=-1"], "top must be a positive integer"),
        (["text=x", "top=abc"], "top must be a positive integer"),
    ],
)
def test_main_rejects_bad_options(capsys, args, message):
    with pytest.raises(SystemExit) as exc_info:
        main(args)
    assert exc_info.value.code == 1
    out = capsys.readouterr().out
    assert "❌ Error running analysis" in out
    assert message in out


def test_main_missing_file(tmp_path, capsys):
    with pytest.raises(SystemExit) as exc_info:
        main([f"files={tmp_path / 'missing.txt'}"])
    assert exc_info.value.code == 1
    assert "❌ Error running analysis" in capsys.readouterr().out
