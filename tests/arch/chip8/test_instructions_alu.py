import unittest
from chip8_tracer.arch.chip8.cpu import Chip8Cpu
from chip8_tracer.arch.chip8.instructions import decode_opcode, execute_instruction

class TestChip8AluInstructions(unittest.TestCase):
    def setUp(self):
        self.cpu = Chip8Cpu()
        self.state = self.cpu.get_state()

    def _execute(self, opcode):
        execute_instruction(decode_opcode(opcode, self.state.pc), self.state)

    def test_ld_imm(self):
        for x in range(16):
            for kk in (0x00, 0x01, 0x7F, 0xFF):
                self._execute(0x6000 | (x << 8) | kk)
                self.assertEqual(self.state.registers[x], kk)

    def test_ld_reg(self):
        self.state.registers[2] = 0x55
        self._execute(0x8120)
        self.assertEqual(self.state.registers[1], 0x55)
        self.assertEqual(self.state.registers[2], 0x55)

    def test_add_imm_wraps_without_flag(self):
        self.state.registers[0] = 0xFF
        self.state.registers[0xF] = 0x77
        self._execute(0x7002)
        self.assertEqual(self.state.registers[0], 0x01)
        self.assertEqual(self.state.registers[0xF], 0x77)

    def test_add_imm_never_touches_vf(self):
        for vf in (0, 1, 0xAB):
            self.state.registers[0xF] = vf
            self.state.registers[5] = 0x10
            self._execute(0x7520)
            self.assertEqual(self.state.registers[5], 0x30)
            self.assertEqual(self.state.registers[0xF], vf)

    # @intent:test_case VFを対象にしたADD Vx, byteは通常のレジスタとして加算されます。
    def test_add_imm_on_vf(self):
        self.state.registers[0xF] = 0xFE
        self._execute(0x7F03)
        self.assertEqual(self.state.registers[0xF], 0x01)

    def test_or_and_xor(self):
        self.state.registers[1] = 0b1100
        self.state.registers[2] = 0b1010
        self._execute(0x8121)
        self.assertEqual(self.state.registers[1], 0b1110)

        self.state.registers[1] = 0b1100
        self._execute(0x8122)
        self.assertEqual(self.state.registers[1], 0b1000)

        self.state.registers[1] = 0b1100
        self._execute(0x8123)
        self.assertEqual(self.state.registers[1], 0b0110)
        self.assertEqual(self.state.registers[2], 0b1010)

    def test_logic_ops_do_not_touch_vf(self):
        self.state.registers[0xF] = 0x42
        self.state.registers[1] = 0xF0
        self.state.registers[2] = 0x0F
        for opcode in (0x8121, 0x8122, 0x8123, 0x8120):
            self._execute(opcode)
        self.assertEqual(self.state.registers[0xF], 0x42)

    def test_add_reg_carry(self):
        self.state.registers[3] = 200
        self.state.registers[4] = 100
        self._execute(0x8344)
        self.assertEqual(self.state.registers[3], 44)
        self.assertEqual(self.state.registers[0xF], 1)

    def test_add_reg_clears_flag(self):
        self.state.registers[0xF] = 1
        self.state.registers[0] = 5
        self.state.registers[1] = 10
        self._execute(0x8014)
        self.assertEqual(self.state.registers[0], 15)
        self.assertEqual(self.state.registers[0xF], 0)

    def test_add_reg_boundary(self):
        self.state.registers[0] = 0xFF
        self.state.registers[1] = 0x00
        self._execute(0x8014)
        self.assertEqual(self.state.registers[0], 0xFF)
        self.assertEqual(self.state.registers[0xF], 0)

        self.state.registers[1] = 0x01
        self._execute(0x8014)
        self.assertEqual(self.state.registers[0], 0x00)
        self.assertEqual(self.state.registers[0xF], 1)

    def test_add_reg_all_values_sampled(self):
        for a in range(0, 256, 15):
            for b in range(0, 256, 17):
                self.state.registers[6] = a
                self.state.registers[7] = b
                self._execute(0x8674)
                self.assertEqual(self.state.registers[6], (a + b) % 256)
                self.assertEqual(self.state.registers[0xF], 1 if a + b > 255 else 0)

    # @intent:test_case VFが加算先の場合、最終的なVFはキャリーの値になります。
    def test_add_reg_into_vf(self):
        self.state.registers[0xF] = 0x10
        self.state.registers[1] = 0x20
        self._execute(0x8F14)
        self.assertEqual(self.state.registers[0xF], 0)

        self.state.registers[0xF] = 0xF0
        self.state.registers[1] = 0x20
        self._execute(0x8F14)
        self.assertEqual(self.state.registers[0xF], 1)

    def test_add_reg_same_register(self):
        self.state.registers[2] = 0x90
        self._execute(0x8224)
        self.assertEqual(self.state.registers[2], 0x20)
        self.assertEqual(self.state.registers[0xF], 1)

if __name__ == '__main__':
    unittest.main()
