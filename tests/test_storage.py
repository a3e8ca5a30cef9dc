import pytest

from riuos_installer.lib import storage


def test_part_device():
    assert storage.part_device("/dev/sda", 2) == "/dev/sda2"
    assert storage.part_device("/dev/nvme0n1", 2) == "/dev/nvme0n1p2"
    assert storage.part_device("/dev/mmcblk0", 1) == "/dev/mmcblk0p1"


def test_fdisk_script_omits_number_for_first_partition():
    first = storage.fdisk_new_partition_script(storage.PartitionSpec(number=1, size="+2M", code="83"))
    swap = storage.fdisk_new_partition_script(storage.PartitionSpec(number=3, size="+1G", code="82"))

    assert first.split("\n") == ["n", "p", "1", "", "+2M", "t", "", "83", "w", ""]
    assert swap.split("\n") == ["n", "p", "3", "", "+1G", "t", "3", "82", "w", ""]


def test_fdisk_script_rest_of_disk():
    root = storage.PartitionSpec.from_config({"number": 4, "size": "", "code": "83", "fs": "ext4"})

    lines = storage.fdisk_new_partition_script(root).split("\n")

    assert lines[3:5] == ["", ""]
    assert root.fs == "ext4" and root.kind == "p"


def test_create_partition_feeds_fdisk_and_waits(procs, monkeypatch):
    waits = []
    monkeypatch.setattr(storage.time, "sleep", waits.append)
    spec = storage.PartitionSpec(number=2, size="+128M", code="83")

    dev = storage.create_partition("/dev/sda", spec, settle_seconds=10)

    assert dev == "/dev/sda2"
    assert procs.argvs == [["fdisk", "/dev/sda"]]
    assert procs.calls[0].input == storage.fdisk_new_partition_script(spec)
    assert waits == [10]


def test_create_partition_dry_run_skips_wait(procs, monkeypatch):
    waits = []
    monkeypatch.setattr(storage.time, "sleep", waits.append)

    storage.create_partition("/dev/sda", storage.PartitionSpec(number=1, size="+2M", code="83"), dry_run=True)

    assert procs.calls == [] and waits == []


def test_set_partition_bootable(procs):
    storage.set_partition_bootable("/dev/sda", 2)

    assert procs.calls[0].argv == ["fdisk", "/dev/sda"]
    assert procs.calls[0].input == "a\n2\nw\n"


def test_count_partitions():
    assert storage.count_partitions("disk\n") == 0
    assert storage.count_partitions("disk\npart\npart\npart\npart\n") == 4


def test_check_partitions_count(procs):
    procs.respond(["lsblk"], output="disk\npart\n")

    storage.check_partitions_count("/dev/sda", 1)
    with pytest.raises(RuntimeError, match="Expected:0; found:1"):
        storage.check_partitions_count("/dev/sda", 0)

    assert procs.argvs[0] == ["lsblk", "-ln", "-o", "TYPE", "/dev/sda"]
