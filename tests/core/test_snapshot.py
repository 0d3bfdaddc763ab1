# tests/core/test_snapshot.py
"""
retro_core_6502.core.snapshotモジュールの単体テスト。
"""
import dataclasses

import pytest

from retro_core_6502.core.snapshot import Metadata, Operation, Snapshot
from retro_core_6502.transport.bus import BusAccess, BusAccessType

# @intent:test_suite 実行記録の不変データ構造を検証します。


class TestOperation:
    # @intent:test_case_text ニーモニックとオペランドから表示文字列を組み立てることを検証します。
    def test_text_with_operands(self):
        op = Operation(opcode=0xA9, mnemonic="LDA", operands=["#$55"], operand_bytes=[0x55],
                       cycle_count=2, length=2)
        assert op.text == "LDA #$55"
        assert op.opcode_hex == "A9"

    def test_text_without_operands(self):
        op = Operation(opcode=0xEA, mnemonic="NOP")
        assert op.text == "NOP"
        assert op.length == 1
        assert op.operands == []

    # @intent:test_case_immutability 不変であることを検証します。
    def test_immutability(self):
        op = Operation(opcode=0xEA, mnemonic="NOP")
        with pytest.raises(dataclasses.FrozenInstanceError):
            op.mnemonic = "BRK"


class TestSnapshot:
    def test_snapshot_init(self):
        access = BusAccess(address=0x10, data=0x01, access_type=BusAccessType.READ)
        snapshot = Snapshot(
            state={"pc": 2},
            operation=Operation(opcode=0xEA, mnemonic="NOP", cycle_count=2),
            metadata=Metadata(cycle_count=2, step_count=1, address=0),
            bus_activity=[access],
        )
        assert snapshot.metadata.diagnostic is None
        assert snapshot.bus_activity == [access]
        with pytest.raises(dataclasses.FrozenInstanceError):
            snapshot.metadata = None
