# chip8_tracer/loader/loader.py
"""
プログラムローダーモジュール。
生バイナリ（.ch8）および Intel HEX 形式のロードをサポートします。
ロードはメモリのアクセスログに残りません。
"""
from chip8_tracer.transport.memory import Memory

class BinaryLoader:
    """
    ビッグエンディアンの16bitオペコードを詰めて並べた生バイナリを、指定アドレスにロードするローダー。
    """
    def load_binary(self, file_path: str, memory: Memory, base_address: int = 0x000) -> int:
        with open(file_path, 'rb') as f:
            image = f.read()
        if base_address < 0 or base_address + len(image) > memory.get_size():
            raise ValueError(
                f"Program of {len(image)} bytes does not fit in memory at {base_address:#05x}"
            )
        return memory.load(base_address, image)

class IntelHexLoader:
    """
    Intel HEX形式のファイルを解析し、データをメモリにロードするローダー。
    base_addressは各レコードのアドレスに加算されます。
    """
    def load_intel_hex(self, file_path: str, memory: Memory, base_address: int = 0x000) -> int:
        current_extended_address = 0x0000
        loaded = 0

        with open(file_path, 'r') as f:
            for line_num, line in enumerate(f, 1):
                line = line.strip()
                if not line or not line.startswith(':'):
                    continue

                comment_start = line.find(';')
                if comment_start != -1:
                    line = line[:comment_start].strip()

                if len(line) < 11:
                    raise ValueError(f"Invalid Intel HEX record format on line {line_num}: Too short - {line}")

                try:
                    data_length = int(line[1:3], 16)
                    address_field = int(line[3:7], 16)
                    record_type = int(line[7:9], 16)
                    data_part_str = line[9:-2]
                    checksum_field = int(line[-2:], 16)
                except ValueError as e:
                    raise ValueError(f"Error parsing Intel HEX line {line_num}: {line} - {e}")

                if len(data_part_str) != data_length * 2:
                    raise ValueError(f"Data length mismatch on line {line_num}")

                try:
                    data = bytes.fromhex(data_part_str)
                except ValueError as e:
                    raise ValueError(f"Error parsing Intel HEX line {line_num}: {line} - {e}")

                checksum_sum = data_length + (address_field >> 8) + (address_field & 0xFF) + record_type + sum(data)
                calculated_checksum = (~checksum_sum + 1) & 0xFF
                if calculated_checksum != checksum_field:
                    raise ValueError(f"Checksum mismatch on line {line_num}: Calculated {calculated_checksum:02X}, Expected {checksum_field:02X}")

                if record_type == 0x00:
                    load_address = base_address + current_extended_address + address_field
                    if load_address < 0 or load_address + len(data) > memory.get_size():
                        raise ValueError(f"Record on line {line_num} does not fit in memory at {load_address:#05x}")
                    loaded += memory.load(load_address, data)
                elif record_type == 0x01:
                    break
                elif record_type == 0x04:
                    current_extended_address = int(data_part_str, 16) << 16
                elif record_type == 0x02:
                    current_extended_address = int(data_part_str, 16) << 4
                elif record_type == 0x03 or record_type == 0x05:
                    pass
                else:
                    raise ValueError(f"Unknown Intel HEX record type {record_type:02X} on line {line_num}")

        return loaded

# @intent:responsibility 形式名に応じて適切なローダーへ委譲します。
class ProgramLoader:
    def __init__(self):
        self._binary = BinaryLoader()
        self._ihex = IntelHexLoader()

    def load(self, file_path: str, memory: Memory, base_address: int = 0x000, fmt: str = "binary") -> int:
        """
        プログラムをロードし、書き込んだバイト数を返します。
        """
        if fmt == "binary":
            return self._binary.load_binary(file_path, memory, base_address)
        if fmt == "ihex":
            return self._ihex.load_intel_hex(file_path, memory, base_address)
        raise ValueError(f"Unsupported program format: {fmt}")
