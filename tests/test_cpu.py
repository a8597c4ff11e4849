"""
Rails CPU Unit Tests
====================

Covers every opcode, program counter handling for branches and JMPL, the
halt sentinel, and execution errors. Programs are given as raw records so
the CPU is tested independently of the assembler.
"""

import pytest

from rails_sdk.emulator import RailsCPU, StopCondition
from rails_sdk.errors import DecodeError, InputUnavailableError, ProgramCounterError

HALT = (13, 0, 0, 0)


def run(program, input_handler=None, **registers):
    """Run a program with registers preloaded from r<N>=value keywords."""
    cpu = RailsCPU(program, input_handler=input_handler)
    for name, value in registers.items():
        cpu.state.registers[int(name[1:])] = value
    cpu.run()
    return cpu.state


# =============================================================================
# Arithmetic and Logic
# =============================================================================

class TestArithmetic:
    """Tests for the ALU-backed opcodes."""

    def test_example_program(self):
        state = run([(6, 5, 0), (6, 3, 1), (0, 0, 1, 2), HALT])
        assert state.registers[2] == 8
        assert state.carry is False

    def test_add_carry(self):
        state = run([(0, 1, 2, 3), HALT], r1=250, r2=10)
        assert state.registers[3] == 4
        assert state.carry is True

    def test_addc(self):
        state = run([(0, 1, 1, 3), (1, 2, 2, 4), HALT], r1=200, r2=1)
        assert state.registers[4] == 3

    def test_sub(self):
        state = run([(2, 1, 2, 3), HALT], r1=5, r2=10)
        assert state.registers[3] == 251
        assert state.carry is True

    def test_swb(self):
        state = run([(2, 1, 2, 3), (3, 2, 1, 4), HALT], r1=5, r2=10)
        assert state.registers[4] == 4

    def test_nand(self):
        state = run([(4, 1, 2, 3), HALT], r1=0b1100, r2=0b1010)
        assert state.registers[3] == 0b11110111

    def test_rsft(self):
        state = run([(5, 1, 2), HALT], r1=0b10110101)
        assert state.registers[2] == 0b01011010

    def test_imm(self):
        state = run([(6, 255, 7), HALT])
        assert state.registers[7] == 255

    def test_mov_record(self):
        state = run([(0, 4, 0, 9), HALT], r4=77)
        assert state.registers[9] == 77


# =============================================================================
# Memory and I/O
# =============================================================================

class TestMemory:
    """Tests for loads, stores and OUT/IN."""

    def test_st_and_ld(self):
        state = run([(9, 1, 2), (7, 1, 3), HALT], r1=40, r2=99)
        assert state.ram[40] == 99
        assert state.registers[3] == 99

    def test_stim_and_ldim(self):
        state = run([(10, 200, 1), (8, 200, 2), HALT], r1=17)
        assert state.ram[200] == 17
        assert state.registers[2] == 17

    def test_out(self):
        state = run([(15, 3, 1), HALT], r1=42)
        assert state.io_registers[3] == 42

    def test_in_calls_handler_with_device(self):
        devices = []

        def handler(device):
            devices.append(device)
            return 123

        state = run([(14, 6, 2), HALT], input_handler=handler)
        assert devices == [6]
        assert state.registers[2] == 123

    def test_in_without_handler(self):
        with pytest.raises(InputUnavailableError) as exc_info:
            run([(6, 1, 1), (14, 5, 1), HALT])
        assert exc_info.value.pc == 1
        assert exc_info.value.device == 5
        assert "(pc=1)" in str(exc_info.value)


# =============================================================================
# Control Flow
# =============================================================================

class TestControlFlow:
    """Tests for BEQ, BGT, JMPL and the halt sentinel."""

    def test_beq_taken(self):
        cpu = RailsCPU([(11, 3, 1), (6, 1, 5), (6, 2, 5), HALT])
        cpu.step()
        assert cpu.state.pc == 3

    def test_beq_not_taken_advances(self):
        cpu = RailsCPU([(11, 3, 1), HALT])
        cpu.state.registers[1] = 1
        cpu.step()
        assert cpu.state.pc == 1

    def test_bgt_compares_r15(self):
        cpu = RailsCPU([(12, 2, 1), HALT, HALT])
        cpu.state.registers[15] = 9
        cpu.state.registers[1] = 4
        cpu.step()
        assert cpu.state.pc == 2

    def test_bgt_equal_not_taken(self):
        cpu = RailsCPU([(12, 2, 1), HALT, HALT])
        cpu.state.registers[15] = 4
        cpu.state.registers[1] = 4
        cpu.step()
        assert cpu.state.pc == 1

    def test_jmp_always_taken(self):
        state = run([(11, 2, 15), (6, 1, 1), HALT])
        assert state.registers[1] == 0

    def test_jmpl_links_and_jumps(self):
        program = [(6, 0, 0), (13, 3, 14), HALT, HALT]
        cpu = RailsCPU(program)
        cpu.step()
        cpu.step()
        assert cpu.state.registers[14] == 2
        assert cpu.state.pc == 3

    def test_jmpl_four_slot_record(self):
        cpu = RailsCPU([(13, 2, 0, 5), HALT, HALT])
        cpu.step()
        assert cpu.state.registers[5] == 1
        assert cpu.state.pc == 2

    def test_halt_changes_nothing(self):
        cpu = RailsCPU([HALT])
        assert cpu.step() is False
        assert not cpu.running
        assert cpu.state.pc == 0
        assert not any(cpu.state.registers)

    def test_three_slot_halt(self):
        state = run([(6, 1, 1), (13, 0, 0)])
        assert state.running is False
        assert state.registers[1] == 1

    def test_countdown_loop(self):
        # r1 = 3; loop: r1 -= r2 ; until r1 == r15 (0)
        program = [
            (6, 3, 1),       # 0: IMM r1 3
            (6, 1, 2),       # 1: IMM r2 1
            (2, 1, 2, 1),    # 2: SUB r1 r1 r2
            (0, 3, 3, 3),    # 3: ADD r3 r3 r3 (filler)
            (11, 6, 1),      # 4: BEQ 6 r1
            (11, 2, 15),     # 5: JMP 2
            HALT,            # 6
        ]
        state = run(program)
        assert state.registers[1] == 0
        assert state.steps == 3 * 4 - 1 + 2 + 1


# =============================================================================
# Execution Errors
# =============================================================================

class TestExecutionErrors:
    """Tests for decode and program counter failures."""

    def test_running_off_the_end(self):
        with pytest.raises(ProgramCounterError) as exc_info:
            run([(6, 1, 1)])
        assert exc_info.value.pc == 1

    def test_jump_outside_program(self):
        with pytest.raises(ProgramCounterError):
            run([(11, 50, 15)])

    def test_empty_program(self):
        with pytest.raises(ProgramCounterError):
            run([])

    def test_bad_opcode(self):
        with pytest.raises(DecodeError) as exc_info:
            run([(6, 1, 1), (16, 0, 0, 0)])
        assert exc_info.value.pc == 1

    def test_short_record(self):
        with pytest.raises(DecodeError):
            run([(0, 1)])

    def test_fresh_state_per_cpu(self):
        first = RailsCPU([(6, 9, 1), HALT])
        first.run()
        second = RailsCPU([HALT])
        assert second.state.registers[1] == 0
        assert second.state is not first.state


# =============================================================================
# Running to a Stop Condition
# =============================================================================

class TestRunUntil:
    """Tests for run_until() stopping in front of I/O or the halt."""

    def test_stops_before_out(self):
        cpu = RailsCPU([(6, 4, 1), (6, 2, 2), (15, 0, 1), HALT])
        state = cpu.run_until(StopCondition.IO)
        assert state.pc == 2
        assert state.steps == 2
        assert state.io_registers[0] == 0
        assert cpu.running

    def test_stops_before_in_without_calling_handler(self):
        cpu = RailsCPU([(6, 4, 1), (14, 0, 2), HALT])
        state = cpu.run_until(StopCondition.IO)
        assert state.pc == 1
        assert state.registers[1] == 4

    def test_already_at_stop(self):
        cpu = RailsCPU([(15, 0, 1), HALT])
        assert cpu.run_until(StopCondition.IO).steps == 0

    def test_resume_after_servicing_io(self):
        """A host steps over the I/O instruction, then runs to the next one."""
        cpu = RailsCPU([(6, 7, 1), (15, 0, 1), (6, 8, 1), (15, 1, 1), HALT])
        cpu.run_until(StopCondition.IO)
        cpu.step()
        state = cpu.run_until(StopCondition.IO)
        assert state.pc == 3
        assert state.io_registers[0] == 7

    def test_stops_before_halt(self):
        cpu = RailsCPU([(6, 1, 1), (15, 0, 1), HALT])
        state = cpu.run_until(StopCondition.EXIT)
        assert state.pc == 2
        assert state.io_registers[0] == 1
        assert cpu.running
        cpu.step()
        assert not cpu.running

    def test_halt_ends_io_run(self):
        cpu = RailsCPU([(6, 1, 1), HALT])
        state = cpu.run_until(StopCondition.IO)
        assert not cpu.running
        assert state.steps == 2

    def test_running_off_the_end(self):
        with pytest.raises(ProgramCounterError):
            RailsCPU([(6, 1, 1)]).run_until(StopCondition.EXIT)
