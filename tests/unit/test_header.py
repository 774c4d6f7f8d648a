"""Unit tests for runfile.header."""

import pytest

from runfile.errors import ParseError
from runfile.header import parse_header
from runfile.models import FlagKind, FlagSpec, Parameter, ParamKind


class TestNames:
    def test_single_name(self) -> None:
        cmd = parse_header("build:")
        assert cmd.names == ("build",)
        assert cmd.parameters == ()
        assert cmd.flags == ()

    def test_colon_is_optional(self) -> None:
        assert parse_header("build") == parse_header("build:")

    def test_aliases(self) -> None:
        cmd = parse_header("b, build:")
        assert cmd.names == ("b", "build")
        assert cmd.label == "b"

    def test_three_aliases(self) -> None:
        assert parse_header("b, build, compile:").names == ("b", "build", "compile")

    def test_aliases_without_spaces(self) -> None:
        assert parse_header("b,build:").names == ("b", "build")

    def test_second_bare_word_is_parameter(self) -> None:
        cmd = parse_header("deploy target:")
        assert cmd.names == ("deploy",)
        assert cmd.parameters == (Parameter("target", ParamKind.REQUIRED),)

    def test_aliases_then_parameter(self) -> None:
        cmd = parse_header("b, build target:")
        assert cmd.names == ("b", "build")
        assert [p.name for p in cmd.parameters] == ["target"]

    def test_duplicate_alias(self) -> None:
        with pytest.raises(ParseError, match="Duplicate alias 'b'"):
            parse_header("b, b:")

    def test_trailing_comma(self) -> None:
        with pytest.raises(ParseError, match="Expected an alias"):
            parse_header("b,:")

    def test_comma_followed_by_flag(self) -> None:
        with pytest.raises(ParseError, match="Expected an alias"):
            parse_header("b, --release:")

    def test_empty_header(self) -> None:
        with pytest.raises(ParseError, match="at least one name"):
            parse_header(":")

    def test_starts_with_parameter(self) -> None:
        with pytest.raises(ParseError, match="must start with a name"):
            parse_header("...args:")

    def test_inline_comment_rejected(self) -> None:
        with pytest.raises(ParseError, match="line above"):
            parse_header("build # compile it")


class TestParameters:
    def test_optional(self) -> None:
        cmd = parse_header("greet name?:")
        assert cmd.parameters == (Parameter("name", ParamKind.OPTIONAL),)

    def test_vararg_prefix(self) -> None:
        cmd = parse_header("test ...args:")
        assert cmd.parameters == (Parameter("args", ParamKind.VARARG),)
        assert cmd.vararg is not None

    def test_vararg_suffix(self) -> None:
        assert parse_header("test args...:").parameters == (Parameter("args", ParamKind.VARARG),)

    def test_order_preserved(self) -> None:
        cmd = parse_header("cp src dest? ...rest:")
        assert [p.display for p in cmd.parameters] == ["src", "dest?", "...rest"]

    def test_flags_after_vararg_allowed(self) -> None:
        cmd = parse_header("test ...args --verbose:")
        assert cmd.vararg is not None
        assert len(cmd.flags) == 1

    def test_vararg_not_last(self) -> None:
        with pytest.raises(ParseError, match="must be the last parameter") as exc:
            parse_header("test ...args target:")
        assert exc.value.column == 14

    def test_two_varargs(self) -> None:
        with pytest.raises(ParseError, match="must be the last parameter"):
            parse_header("test ...a ...b:")

    def test_required_after_optional(self) -> None:
        with pytest.raises(ParseError, match="cannot follow an optional"):
            parse_header("cp src? dest:")

    def test_duplicate_parameter(self) -> None:
        with pytest.raises(ParseError, match="Duplicate name 'x'"):
            parse_header("cmd x x?:")

    def test_invalid_parameter_name(self) -> None:
        with pytest.raises(ParseError, match="Invalid parameter"):
            parse_header("cmd 1st:")


class TestFlags:
    def test_long_boolean(self) -> None:
        cmd = parse_header("run --debug:")
        assert cmd.flags == (FlagSpec(long="debug"),)

    def test_short_boolean(self) -> None:
        assert parse_header("run -v:").flags == (FlagSpec(short="v"),)

    def test_short_long_pair(self) -> None:
        cmd = parse_header("build -r, --release:")
        assert cmd.flags == (FlagSpec(short="r", long="release"),)

    def test_pair_in_one_token(self) -> None:
        assert parse_header("build -r,--release:").flags == (FlagSpec(short="r", long="release"),)

    def test_long_before_short(self) -> None:
        assert parse_header("build --release, -r:").flags == (FlagSpec(short="r", long="release"),)

    def test_value_flag(self) -> None:
        flag = parse_header("build --output=<file>:").flags[0]
        assert flag.kind is FlagKind.VALUE
        assert flag.long == "output"
        assert flag.placeholder == "file"

    def test_value_flag_with_short(self) -> None:
        flag = parse_header("build -o, --output=<file>:").flags[0]
        assert flag.short == "o"
        assert flag.takes_value

    def test_bare_placeholder(self) -> None:
        assert parse_header("build --jobs=N").flags[0].placeholder == "N"

    def test_dashed_long_form(self) -> None:
        assert parse_header("test --per-crate:").flags[0].long == "per-crate"

    def test_params_and_flags_interleaved(self) -> None:
        cmd = parse_header("b, build --release target -v dest?:")
        assert [p.name for p in cmd.parameters] == ["target", "dest"]
        assert [f.name for f in cmd.flags] == ["release", "v"]

    def test_unbalanced_placeholder(self) -> None:
        with pytest.raises(ParseError, match="Unbalanced"):
            parse_header("build --output=<file:")

    def test_unbalanced_placeholder_closing(self) -> None:
        with pytest.raises(ParseError, match="Unbalanced"):
            parse_header("build --output=file>")

    def test_empty_placeholder(self) -> None:
        with pytest.raises(ParseError, match="Missing value placeholder"):
            parse_header("build --output=")

    def test_single_dash_long_name(self) -> None:
        with pytest.raises(ParseError, match="Malformed flag '-release'"):
            parse_header("build -release:")

    def test_triple_dash(self) -> None:
        with pytest.raises(ParseError, match="Malformed flag"):
            parse_header("build ---x:")

    def test_pair_of_two_shorts(self) -> None:
        with pytest.raises(ParseError, match="one short and one long"):
            parse_header("build -r, -x:")

    def test_pair_missing_second_form(self) -> None:
        with pytest.raises(ParseError, match="second flag form"):
            parse_header("build -r,:")

    def test_placeholder_on_short_of_pair(self) -> None:
        with pytest.raises(ParseError, match="belongs on '--output'"):
            parse_header("build -o=<f>, --output:")

    def test_duplicate_long(self) -> None:
        with pytest.raises(ParseError, match="Duplicate flag '--release'"):
            parse_header("build --release -r, --release:")

    def test_duplicate_short(self) -> None:
        with pytest.raises(ParseError, match="Duplicate flag '-r'"):
            parse_header("build -r, --release -r, --run:")

    def test_flag_variable_collides_with_parameter(self) -> None:
        with pytest.raises(ParseError, match="variable 'output'"):
            parse_header("build output --output=<file>:")

    def test_short_flags_differing_in_case_collide(self) -> None:
        with pytest.raises(ParseError, match="maps to variable"):
            parse_header("ls -r -R:")

    def test_flag_collides_with_uppercase_parameter(self) -> None:
        with pytest.raises(ParseError, match="variable 'TARGET'"):
            parse_header("deploy Target --target:")

    def test_parameters_differing_in_case_collide(self) -> None:
        with pytest.raises(ParseError, match="Duplicate name 'NAME'"):
            parse_header("greet name NAME?:")


class TestColon:
    def test_colon_inside_name_allowed(self) -> None:
        assert parse_header("db:migrate:").names == ("db:migrate",)

    def test_colon_after_name_with_more_tokens(self) -> None:
        with pytest.raises(ParseError, match="':' must follow all parameters and flags") as exc:
            parse_header("build: target")
        assert exc.value.column == 6

    def test_colon_after_parameter(self) -> None:
        with pytest.raises(ParseError, match="':' must follow"):
            parse_header("deploy target: --dry-run")

    def test_spaced_trailing_colon(self) -> None:
        assert parse_header("build target :").names == ("build",)


class TestParseErrorLocation:
    def test_line_and_column(self) -> None:
        with pytest.raises(ParseError) as exc:
            parse_header("build --output=<x", line_number=7, source_file="Runfile")
        assert exc.value.line == 7
        assert exc.value.column == 7
        assert str(exc.value).startswith("Runfile:7:7: ")


class TestSignatureRoundTrip:
    @pytest.mark.parametrize(
        "header",
        [
            "build:",
            "b, build, compile:",
            "deploy target env?:",
            "t, test ...args --per-crate:",
            "b, build target? -r, --release -o, --output=<file> --jobs=<n> -v:",
        ],
    )
    def test_reparse_is_stable(self, header: str) -> None:
        cmd = parse_header(header)
        assert cmd.signature == header
        assert parse_header(cmd.signature) == cmd

    def test_bare_placeholder_normalised(self) -> None:
        cmd = parse_header("build --jobs=N")
        assert cmd.signature == "build --jobs=<N>:"
        assert parse_header(cmd.signature) == cmd
