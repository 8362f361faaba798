#!/usr/bin/env python3
"""Tests for destination image instructions."""

from stagecopy.transfer.command import StagingMount, TransferCommand
from stagecopy.transfer.image import ImageInstructions


class TestImageInstructions:
    """Tests for ImageInstructions."""

    def test_empty(self, image):
        assert len(image) == 0
        assert image.volumes == []
        assert not image.has_volume("/anything")

    def test_add_command_records_shell(self, image):
        command = TransferCommand(source="/a", destination="/b")
        image.add_command(command)

        assert image.commands == [command.to_shell()]
        assert len(image) == 1

    def test_commands_keep_order(self, image):
        for dst in ("/one", "/two", "/three"):
            image.add_command(TransferCommand(source="/s", destination=dst))

        assert [c.split()[-1] for c in image.commands] == ["/one", "/two", "/three"]

    def test_add_volume(self, image):
        mount = StagingMount("/h", "/c")
        image.add_volume(mount)

        assert image.volumes == [mount]
        assert image.volume_args() == ["/h:/c:ro"]

    def test_duplicate_volume_once(self, image):
        image.add_volume(StagingMount("/h", "/c"))
        image.add_volume(StagingMount("/h", "/c"))

        assert len(image.volumes) == 1

    def test_has_volume_ignores_trailing_slash(self, image):
        image.add_volume(StagingMount("/h", "/.stagecopy/artifact/web"))

        assert image.has_volume("/.stagecopy/artifact/web/")
        assert not image.has_volume("/.stagecopy/artifact/api")
