"""
MOS 6502 命令セット（アドレッシングモード、命令実装、オペコード表）。
"""
