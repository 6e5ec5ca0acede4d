"""
Tests for domain models — parsing, validation, helpers.
"""

import pytest
from pydantic import ValidationError

from orchestra.core.errors import ConfigError, InventoryMismatchError, ModuleBuildError
from orchestra.core.models import (
    Action,
    AlgorithmSelection,
    CoverageSettings,
    CryptoAlgorithm,
    HashAlgorithm,
    Invocation,
    InvocationRecord,
    Module,
    Receipt,
    RecordStatus,
    Stage,
    StageKind,
    WorkspaceConfig,
)


class TestAction:
    def test_tokens(self):
        assert Action.parse("build") is Action.BUILD
        assert Action.parse("test") is Action.TEST
        assert Action.parse("clippy") is Action.LINT

    def test_parse_is_case_insensitive(self):
        assert Action.parse(" Build ") is Action.BUILD

    def test_lint_is_not_a_token(self):
        with pytest.raises(ConfigError, match="Unknown action 'lint'"):
            Action.parse("lint")

    @pytest.mark.parametrize("token", ["", None, "deploy"])
    def test_unknown_tokens(self, token):
        with pytest.raises(ConfigError):
            Action.parse(token)

    def test_subcommands(self):
        assert Action.BUILD.subcommand == "build"
        assert Action.TEST.subcommand == "test"
        assert Action.LINT.subcommand == "clippy"

    def test_strict_only_for_build_and_test(self):
        assert Action.BUILD.strict
        assert Action.TEST.strict
        assert not Action.LINT.strict


class TestReceipt:
    def test_success(self):
        r = Receipt.success(adapter="cargo", action_id="a", output="done")
        assert r.ok
        assert not r.failed

    def test_failure(self):
        r = Receipt.failure(adapter="cargo", action_id="a", error="boom", return_code=101)
        assert r.failed
        assert r.error == "boom"
        assert r.return_code == 101

    def test_skip(self):
        r = Receipt.skip(adapter="cargo", action_id="a", reason="later")
        assert r.status == "skipped"
        assert r.output == "later"


class TestAlgorithmSelection:
    def test_defaults(self):
        sel = AlgorithmSelection()
        assert sel.hash is HashAlgorithm.SHA3
        assert sel.crypto is CryptoAlgorithm.SECP256K1
        assert sel.features == ("sha3hash", "secp256k1")

    def test_frozen(self):
        sel = AlgorithmSelection()
        with pytest.raises(ValidationError):
            sel.hash = HashAlgorithm.SM3

    def test_str(self):
        sel = AlgorithmSelection(hash=HashAlgorithm.SM3, crypto=CryptoAlgorithm.SM2)
        assert str(sel) == "sm3hash+sm2"

    def test_short_names(self):
        assert HashAlgorithm.BLAKE2B.short_name == "blake2b"


class TestInvocation:
    def test_label_without_features(self):
        assert Invocation(id="s:m", module="m").label == "m"

    def test_label_with_features(self):
        inv = Invocation(id="s:m:a+b", module="m", features=("a", "b"))
        assert inv.label == "m [a b]"

    def test_records(self):
        inv = Invocation(id="s:m", module="m", stage="s", features=("f",))
        executed = InvocationRecord.executed(inv, duration_ms=5)
        skipped = InvocationRecord.skip(inv, reason="not yet")
        assert executed.status == RecordStatus.EXECUTED
        assert not executed.skipped
        assert skipped.skipped
        assert skipped.features == ("f",)
        assert skipped.output == "not yet"


class TestStage:
    def test_string_modules_are_coerced(self):
        stage = Stage(name="s", modules=["a", "b"])
        assert stage.module_names == ["a", "b"]
        assert all(isinstance(m, Module) for m in stage.modules)

    def test_matrix_requires_features(self):
        with pytest.raises(ValidationError, match="declares no features"):
            Stage(name="t", kind=StageKind.MATRIX, modules=["pubsub"])

    def test_features_outside_matrix_rejected(self):
        with pytest.raises(ValidationError, match="not 'matrix'"):
            Stage(name="s", modules=[{"name": "pubsub", "features": ["kafka"]}])

    def test_duplicate_features_rejected(self):
        with pytest.raises(ValidationError, match="duplicate features: kafka"):
            Stage(
                name="t",
                kind=StageKind.MATRIX,
                modules=[{"name": "pubsub", "features": ["kafka", "zeromq", "kafka"]}],
            )

    def test_blank_module_name_rejected(self):
        with pytest.raises(ValidationError):
            Stage(name="s", modules=["  "])


class TestWorkspaceConfig:
    def test_minimal(self):
        ws = WorkspaceConfig(name="w")
        assert ws.stages == []
        assert ws.build_output_dirs == ["target"]
        assert ws.tools.build == "cargo"
        assert ws.tools.strict_env == {"RUSTFLAGS": "-D warnings"}

    def test_default_skip_set_is_lint_algorithm_stages(self):
        ws = WorkspaceConfig(name="w")
        assert ws.skipped_kinds(Action.LINT) == {
            StageKind.HASH,
            StageKind.CRYPTO,
            StageKind.HASH_CRYPTO,
        }
        assert ws.skipped_kinds(Action.BUILD) == frozenset()
        assert ws.skipped_kinds(Action.TEST) == frozenset()

    def test_skip_keys_are_action_tokens(self):
        ws = WorkspaceConfig.model_validate({"name": "w", "skip": {"test": ["matrix"]}})
        assert ws.skipped_kinds(Action.TEST) == {StageKind.MATRIX}
        assert ws.skipped_kinds(Action.LINT) == frozenset()

    def test_unknown_skip_key_rejected(self):
        with pytest.raises(ValidationError):
            WorkspaceConfig.model_validate({"name": "w", "skip": {"lint": ["hash"]}})

    def test_duplicate_module_rejected(self):
        with pytest.raises(ValidationError, match="declared in both"):
            WorkspaceConfig(
                name="w",
                stages=[Stage(name="a", modules=["x"]), Stage(name="b", modules=["x"])],
            )

    def test_duplicate_stage_rejected(self):
        with pytest.raises(ValidationError, match="duplicate stage"):
            WorkspaceConfig(name="w", stages=[Stage(name="a"), Stage(name="a")])

    def test_module_names_in_order(self, workspace):
        assert workspace.module_names() == [
            "types", "logger", "pubsub", "util", "hashable", "crypto", "proto",
        ]

    def test_get_stage(self, workspace):
        assert workspace.get_stage("transports").kind == StageKind.MATRIX
        assert workspace.get_stage("nope") is None


class TestCoverageSettings:
    def test_defaults(self):
        cov = CoverageSettings()
        assert cov.command[0] == "kcov"
        assert cov.upload_command[0] == "codecov"

    def test_unknown_placeholder_rejected(self):
        with pytest.raises(ValidationError, match="unknown placeholder"):
            CoverageSettings(command=["kcov", "{binary}"])

    def test_empty_command_rejected(self):
        with pytest.raises(ValidationError):
            CoverageSettings(upload_command=[])


class TestErrors:
    def test_module_build_error_message(self):
        err = ModuleBuildError("pubsub", ("kafka",), "exit 101")
        assert err.module == "pubsub"
        assert "pubsub [kafka]" in str(err)
        assert "exit 101" in str(err)

    def test_inventory_mismatch_message(self):
        err = InventoryMismatchError(["c"], plan_file="orchestra.yml")
        assert err.module == "c"
        assert "c" in str(err)
        assert "orchestra.yml" in str(err)
