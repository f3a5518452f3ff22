"""
tests/test_session_controller.py
Session controller driven end to end with mock player and encoder
"""

from pathlib import Path

import pytest

from wavtagger.errors import DecodeError, ConversionError, FilesystemError
from wavtagger.finalize.batch import BatchFinalizer
from wavtagger.session.commands import (
    Quit,
    Confirm,
    InsertChar,
    DeleteFile,
    SeekForward,
    SeekBackward,
)
from wavtagger.session.controller import SessionController, remove_from_disk
from wavtagger.session.state import SubState
from tests.mocks.mock_player import MockPlayer, MockConverter, MockTagWriter, flat_waveform


@pytest.fixture
def wav_files(tmp_path):
    files = []
    for name in ("one.wav", "two.wav", "three.wav"):
        path = tmp_path / name
        path.write_bytes(b"RIFF")
        files.append(path)
    return files


def make_controller(files, player=None, converter=None, tag_writer=None, **kwargs):
    finalizer = BatchFinalizer(converter=converter or MockConverter(),
                               tag_writer=tag_writer or MockTagWriter())
    return SessionController(files,
                             player=player or MockPlayer(),
                             finalizer=finalizer,
                             waveform_fn=flat_waveform,
                             waveform_points=16,
                             **kwargs)


def type_and_confirm(controller, text):
    for c in text:
        controller.handle(InsertChar(c))
    return controller.handle(Confirm())


class TestStartAndPlayback:

    def test_start_loads_first_file(self, wav_files):
        player = MockPlayer(durations={"one.wav": 42.0})
        controller = make_controller(wav_files, player=player)
        state = controller.start()
        assert player.loaded == [wav_files[0]]
        assert state.total_duration == 42.0
        assert state.waveform == (1,) * 16
        assert state.sub_state == SubState.AWAITING_LOCATION

    def test_start_decode_error_is_fatal(self, wav_files):
        controller = make_controller(wav_files, player=MockPlayer(undecodable=["one.wav"]))
        with pytest.raises(DecodeError):
            controller.start()

    def test_tick_reads_player(self, wav_files):
        player = MockPlayer(default_duration=20.0)
        controller = make_controller(wav_files, player=player)
        controller.start()
        player.advance(5.0)
        state = controller.tick()
        assert state.playback_position == 5.0
        assert state.progress == pytest.approx(0.25)

    def test_seek_uses_last_tick(self, wav_files):
        player = MockPlayer(default_duration=60.0)
        controller = make_controller(wav_files, player=player)
        controller.start()
        player.advance(12.0)
        controller.tick()
        controller.handle(SeekForward())
        controller.tick()
        controller.handle(SeekBackward())
        assert player.seeks == [17.0, 12.0]

    def test_seek_backward_near_start(self, wav_files):
        player = MockPlayer()
        controller = make_controller(wav_files, player=player)
        controller.start()
        player.advance(2.0)
        controller.tick()
        controller.handle(SeekBackward())
        assert player.seeks == [0.0]

    def test_seek_error_is_reported_not_fatal(self, wav_files):
        controller = make_controller(wav_files, player=MockPlayer(reject_seeks=True))
        controller.start()
        state = controller.handle(SeekForward())
        assert not state.terminate
        assert "Seek failed" in state.status_message
        # next keystroke clears the message
        state = controller.handle(InsertChar("a"))
        assert state.status_message is None


class TestBatch:

    def test_end_to_end(self, wav_files):
        player = MockPlayer()
        converter = MockConverter()
        tag_writer = MockTagWriter()
        controller = make_controller(wav_files, player=player, converter=converter,
                                     tag_writer=tag_writer)
        controller.start()

        type_and_confirm(controller, "porch")
        type_and_confirm(controller, "birds, wind")
        assert controller.state.current_index == 1
        type_and_confirm(controller, "kitchen")
        state = type_and_confirm(controller, "kettle")
        assert state.current_index == 2
        assert player.loaded == wav_files
        type_and_confirm(controller, "garden")
        state = type_and_confirm(controller, "rain , ,thunder")

        assert state.terminate
        assert [c[0] for c in converter.calls] == wav_files
        outputs = [p.with_suffix(".flac") for p in wav_files]
        assert controller.outputs == outputs
        assert all(p.exists() for p in outputs)
        assert len(tag_writer.writes) == 1
        path, record = tag_writer.writes[0]
        assert path == outputs[2]
        assert record.location == "garden"
        assert list(record.tags) == ["rain", "thunder"]

    def test_loads_each_file_in_order(self, wav_files):
        player = MockPlayer()
        controller = make_controller(wav_files, player=player)
        controller.start()
        for _ in range(2):
            controller.handle(Confirm())
            controller.handle(Confirm())
        assert player.loaded == wav_files

    def test_dispatch_parks_finalization(self, wav_files):
        converter = MockConverter()
        controller = make_controller(wav_files[:1], converter=converter)
        controller.start()
        controller.dispatch(Confirm())
        state = controller.dispatch(Confirm())
        assert state.sub_state == SubState.FINALIZING
        assert controller.finalize_pending
        assert converter.calls == []
        controller.finalize()
        assert controller.finished
        assert not controller.finalize_pending
        assert len(converter.calls) == 1

    def test_playback_stopped_before_conversion(self, wav_files):
        player = MockPlayer()
        controller = make_controller(wav_files[:1], player=player)
        controller.start()
        controller.dispatch(Confirm())
        controller.dispatch(Confirm())
        assert player.stop_count == 1
        assert player.current is None

    def test_conversion_failure(self, wav_files):
        converter = MockConverter(fail_on=["two.wav"])
        tag_writer = MockTagWriter()
        controller = make_controller(wav_files, converter=converter, tag_writer=tag_writer)
        controller.start()
        for _ in range(2):
            controller.handle(Confirm())
            controller.handle(Confirm())
        controller.handle(Confirm())
        with pytest.raises(ConversionError):
            controller.handle(Confirm())

        assert [c[0].name for c in converter.calls] == ["one.wav", "two.wav"]
        assert tag_writer.writes == []
        assert wav_files[0].with_suffix(".flac").exists()
        assert not wav_files[2].with_suffix(".flac").exists()
        assert not controller.finished


class TestDeleteAndQuit:

    def test_delete_only_file(self, wav_files):
        converter = MockConverter()
        controller = make_controller(wav_files[:1], converter=converter)
        controller.start()
        state = controller.handle(DeleteFile())
        assert state.files == ()
        assert state.metadata == ()
        assert state.terminate
        assert not wav_files[0].exists()
        assert converter.calls == []
        assert not controller.finalize_pending

    def test_delete_moves_to_next_file(self, wav_files):
        player = MockPlayer(durations={"three.wav": 7.0})
        controller = make_controller(wav_files, player=player)
        controller.start()
        type_and_confirm(controller, "porch")
        type_and_confirm(controller, "a")
        state = controller.handle(DeleteFile())
        assert state.files == (wav_files[0], wav_files[2])
        assert len(state.metadata) == 2
        assert state.current_file == wav_files[2]
        assert state.total_duration == 7.0
        assert player.loaded[-1] == wav_files[2]
        assert not wav_files[1].exists()

    def test_delete_vanished_file_continues(self, wav_files):
        controller = make_controller(wav_files)
        controller.start()
        wav_files[0].unlink()
        state = controller.handle(DeleteFile())
        assert not state.terminate
        assert state.current_file == wav_files[1]
        assert "Delete failed" in state.status_message
        assert "Could not delete" in state.status_message

    def test_delete_failure_from_remover(self, wav_files):
        def refuse(path):
            raise PermissionError(13, "Permission denied", str(path))

        controller = make_controller(wav_files, remover=refuse)
        controller.start()
        state = controller.handle(DeleteFile())
        assert state.files == (wav_files[1],)
        assert state.current_file == wav_files[1]
        assert "Could not delete" in state.status_message
        assert wav_files[0].exists()

    def test_remove_from_disk_raises_filesystem_error(self, tmp_path):
        with pytest.raises(FilesystemError) as exc:
            remove_from_disk(tmp_path / "gone.wav")
        assert exc.value.path == tmp_path / "gone.wav"

    def test_delete_without_remover_keeps_file(self, wav_files):
        controller = make_controller(wav_files, remover=None)
        controller.start()
        controller.handle(DeleteFile())
        assert wav_files[0].exists()
        assert controller.state.files == tuple(wav_files[1:])

    def test_delete_then_next_undecodable_is_fatal(self, wav_files):
        controller = make_controller(wav_files, player=MockPlayer(undecodable=["two.wav"]))
        controller.start()
        with pytest.raises(DecodeError):
            controller.handle(DeleteFile())

    def test_quit(self, wav_files):
        converter = MockConverter()
        controller = make_controller(wav_files, converter=converter)
        controller.start()
        controller.handle(InsertChar("z"))
        state = controller.handle(Quit())
        assert state.terminate
        assert state.metadata[0].location is None
        assert converter.calls == []
        # ticks after termination do nothing
        assert controller.tick() is state
