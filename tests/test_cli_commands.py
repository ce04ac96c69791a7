import json

from typer.testing import CliRunner

from stdrpc.cli.commands import app
from stdrpc.cli.shared.message_utils import parse_hex, parse_param
from stdrpc.protocol.codec import decode_message, encode_message
from stdrpc.protocol.types import Message, Parameter, ParamType

runner = CliRunner()

REQUEST_ID = "12345678-9abc-def0-1234-56789abcdef0"


def _first_line(output: str) -> str:
    return output.strip().splitlines()[0].strip()


def test_parse_param():
    assert parse_param("int:10") == Parameter(ParamType.INT, 10)
    assert parse_param("int:-0x10") == Parameter(ParamType.INT, -16)
    assert parse_param("bool:Yes") == Parameter(ParamType.BOOL, True)
    assert parse_param("str:a:b") == Parameter(ParamType.STRING, "a:b")
    assert parse_param("plain") == Parameter(ParamType.STRING, "plain")


def test_parse_hex_accepts_prefix_and_spaces():
    assert parse_hex("0x01 02\n03") == b"\x01\x02\x03"


def test_encode_prints_hex(isolated_home, request_id):
    result = runner.invoke(app, ["encode", "add", "int:10", "int:20", "--id", REQUEST_ID])
    assert result.exit_code == 0, result.output
    wire = parse_hex(_first_line(result.output))
    assert decode_message(wire) == Message(
        request_id, "add", (Parameter.integer(10), Parameter.integer(20))
    )


def test_encode_rejects_bad_param(isolated_home):
    result = runner.invoke(app, ["encode", "add", "int:ten"])
    assert result.exit_code == 1
    assert "Invalid argument" in result.output


def test_encode_out_of_range_int_follows_config(isolated_home):
    result = runner.invoke(app, ["encode", "f", "int:4294967295"])
    assert result.exit_code == 1
    assert "Encode failed" in result.output

    config_dir = isolated_home / ".stdrpc"
    config_dir.mkdir()
    (config_dir / "config.json").write_text(json.dumps({
        "codec": {"intOverflow": "wrap"},
        "logging": {"level": "ERROR"},
    }))
    result = runner.invoke(app, ["encode", "f", "int:4294967295"])
    assert result.exit_code == 0, result.output
    assert decode_message(parse_hex(_first_line(result.output))).values == [-1]


def test_decode_shows_parameters(isolated_home, request_id):
    wire = encode_message(Message(request_id, "length", (Parameter.string("hello"),)))
    result = runner.invoke(app, ["decode", wire.hex()])
    assert result.exit_code == 0, result.output
    assert "length" in result.output
    assert "'hello'" in result.output


def test_decode_truncated_payload_fails(isolated_home, request_id):
    wire = encode_message(Message(request_id, "length", (Parameter.string("hello"),)))
    result = runner.invoke(app, ["decode", wire[:-1].hex()])
    assert result.exit_code == 1
    assert "INVALID_MESSAGE_LENGTH" in result.output


def test_decode_rejects_non_hex(isolated_home):
    result = runner.invoke(app, ["decode", "zz"])
    assert result.exit_code == 1
    assert "Not a hex payload" in result.output


def test_call_dispatches_to_sample_handlers(isolated_home, request_id):
    wire = encode_message(Message(request_id, "add", (Parameter.integer(10), Parameter.integer(20))))
    result = runner.invoke(app, ["call", wire.hex()])
    assert result.exit_code == 0, result.output
    response = decode_message(parse_hex(_first_line(result.output)))
    assert response == Message(request_id, "add", (Parameter.integer(30),))


def test_call_unknown_function(isolated_home, request_id):
    wire = encode_message(Message(request_id, "multiply"))
    result = runner.invoke(app, ["call", wire.hex()])
    assert result.exit_code == 0, result.output
    response = decode_message(parse_hex(_first_line(result.output)))
    assert response.values == ["Unknown function"]
    assert response.function == ""


def test_demo_runs_all_samples(isolated_home):
    result = runner.invoke(app, ["demo"])
    assert result.exit_code == 0, result.output
    assert "print: Hello, World!" in result.output
    for name in ("print", "length", "add"):
        assert f"{name} response:" in result.output


def test_init_and_status(isolated_home):
    result = runner.invoke(app, ["init"])
    assert result.exit_code == 0, result.output
    assert (isolated_home / ".stdrpc" / "config.json").exists()

    result = runner.invoke(app, ["init"])
    assert result.exit_code == 1

    result = runner.invoke(app, ["status"])
    assert result.exit_code == 0, result.output
    assert "codec.intOverflow" in result.output


def test_version():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert "stdrpc v0.1.0" in result.output


def _write_config(home, data):
    config_dir = home / ".stdrpc"
    config_dir.mkdir(exist_ok=True)
    (config_dir / "config.json").write_text(json.dumps(data))


def test_call_with_long_unknown_function_message(isolated_home, request_id):
    _write_config(isolated_home, {
        "dispatch": {"unknownFunctionMessage": "u" * 300},
        "logging": {"level": "ERROR"},
    })
    wire = encode_message(Message(request_id, "multiply"))
    result = runner.invoke(app, ["call", wire.hex()])
    assert result.exit_code == 0, result.output
    response = decode_message(parse_hex(_first_line(result.output)))
    assert response.values == ["u" * 255]


def test_call_reports_unencodable_response(isolated_home, request_id, monkeypatch):
    from stdrpc.cli import commands

    monkeypatch.setattr(
        commands,
        "call_function",
        lambda request, registry, **kwargs: Message(request.id, "f" * 300),
    )
    wire = encode_message(Message(request_id, "add", (Parameter.integer(1), Parameter.integer(2))))
    result = runner.invoke(app, ["call", wire.hex()])
    assert result.exit_code == 1
    assert "Encode failed" in result.output


def test_file_sink_survives_repeated_commands(isolated_home, request_id, monkeypatch):
    from stdrpc.cli.shared.logging_utils import configure_stderr_logging

    monkeypatch.setenv("STDRPC_LOGGING__LEVEL", "INFO")
    monkeypatch.setenv("STDRPC_LOGGING__FILE_SINK", "true")
    wire = encode_message(Message(request_id, "multiply"))
    try:
        for _ in range(2):
            result = runner.invoke(app, ["call", wire.hex()])
            assert result.exit_code == 0, result.output
    finally:
        configure_stderr_logging("ERROR")

    log_text = (isolated_home / ".stdrpc" / "logs" / "call.log").read_text(encoding="utf-8")
    assert log_text.count("RPC call rejected") == 2


def test_status_reports_malformed_config(isolated_home):
    (isolated_home / ".stdrpc").mkdir()
    (isolated_home / ".stdrpc" / "config.json").write_text("{not json")
    result = runner.invoke(app, ["status"])
    assert result.exit_code == 1
    assert "Failed to load config" in result.output


def test_unknown_log_level_is_reported(isolated_home, request_id):
    _write_config(isolated_home, {"logging": {"level": "LOUD"}})
    result = runner.invoke(app, ["decode", encode_message(Message(request_id)).hex()])
    assert result.exit_code == 1
    assert "Failed to load config" in result.output
