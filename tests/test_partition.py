import io
import threading

import pytest

from pmd.archive.errors import PartitionError, PoisonedError, TruncatedError
from pmd.archive.partition import Partition, SharedFile, read_exact


DATA = bytes(range(256)) * 4


@pytest.fixture
def shared():
    return SharedFile(io.BytesIO(DATA))


def test_read_whole_partition(shared):
    with Partition(shared, 0x10, 0x20) as part:
        assert part.size == 0x20
        assert part.start == 0x10
        assert part.read() == DATA[0x10:0x30]
        assert part.read() == b''
        assert part.tell() == 0x20


def test_read_sized(shared):
    part = Partition(shared, 100, 10)
    assert part.read(4) == DATA[100:104]
    assert part.read(100) == DATA[104:110]
    assert part.read(1) == b''


def test_readinto(shared):
    part = Partition(shared, 8, 4)
    buf = bytearray(8)
    assert part.readinto(buf) == 4
    assert bytes(buf[:4]) == DATA[8:12]


def test_seek_is_clamped(shared):
    part = Partition(shared, 0x40, 0x10)
    assert part.seek(4) == 4
    assert part.seek(2, io.SEEK_CUR) == 6
    assert part.read(2) == DATA[0x46:0x48]
    assert part.seek(-1, io.SEEK_END) == 0xf
    assert part.seek(0x100) == 0x10
    assert part.seek(-0x100, io.SEEK_CUR) == 0
    with pytest.raises(ValueError):
        part.seek(0, 3)


def test_out_of_bounds(shared):
    with pytest.raises(PartitionError) as excinfo:
        Partition(shared, len(DATA) - 4, 5)
    assert excinfo.value.size == len(DATA)
    # empty partition at the very end is valid
    assert Partition(shared, len(DATA), 0).read() == b''


def test_closed_partition(shared):
    part = Partition(shared, 0, 4)
    part.close()
    with pytest.raises(ValueError):
        part.read()
    with pytest.raises(ValueError):
        part.seek(0)


def test_interleaved_views_are_independent(shared):
    first = Partition(shared, 0, 300)
    second = Partition(shared, 500, 200)

    a1 = first.read(100)
    b1 = second.read(50)
    a2 = first.read()
    b2 = second.read()
    first.seek(0)
    second.seek(0)
    b3 = second.read()
    a3 = first.read()

    assert a1 + a2 == DATA[0:300] == a3
    assert b1 + b2 == DATA[500:700] == b3


def test_views_ignore_shared_position(shared):
    part = Partition(shared, 10, 10)
    part.read(5)
    with shared.locked() as file:
        file.seek(900)
    assert part.read() == DATA[15:20]


def test_concurrent_reads(shared):
    ranges = [(i * 37, 64 + i) for i in range(8)]
    errors = []

    def worker(offset, length):
        try:
            with Partition(shared, offset, length) as part:
                for _ in range(200):
                    part.seek(0)
                    assert part.read(7) + part.read() == DATA[offset:offset + length]
        except BaseException as exc:  # collected for the main thread
            errors.append(exc)

    threads = [threading.Thread(target=worker, args=r) for r in ranges]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []


class _ExplodingIO(io.BytesIO):
    explode = None

    def read(self, n=-1):
        if self.explode is not None:
            raise self.explode
        return super().read(n)


def test_poisoned_after_unexpected_failure():
    file = _ExplodingIO(DATA)
    shared = SharedFile(file)
    part = Partition(shared, 0, 16)

    file.explode = RuntimeError('interrupted')
    with pytest.raises(RuntimeError):
        part.read()
    assert shared.poisoned

    file.explode = None
    with pytest.raises(PoisonedError):
        part.read()
    with pytest.raises(PoisonedError):
        Partition(shared, 0, 4)


def test_oserror_does_not_poison():
    file = _ExplodingIO(DATA)
    shared = SharedFile(file)
    part = Partition(shared, 0, 16)

    file.explode = OSError('disk gone')
    with pytest.raises(OSError):
        part.read()
    assert not shared.poisoned

    file.explode = None
    assert part.read() == DATA[:16]


def test_shared_file_closes_after_last_reference():
    file = io.BytesIO(DATA)
    shared = SharedFile(file, close_file=True)
    part = Partition(shared, 0, 8)

    shared.release()  # owner is done
    assert not file.closed
    assert part.read() == DATA[:8]

    part.close()
    assert file.closed
    assert shared.closed


def test_shared_file_not_owned_stays_open():
    file = io.BytesIO(DATA)
    shared = SharedFile(file)
    shared.release()
    assert shared.closed
    assert not file.closed


def test_read_exact():
    reader = io.BytesIO(b'abc')
    assert read_exact(reader, 2, 'two') == b'ab'
    with pytest.raises(TruncatedError) as excinfo:
        read_exact(reader, 2, 'two more')
    assert isinstance(excinfo.value, EOFError)
    assert excinfo.value.actual == 1
