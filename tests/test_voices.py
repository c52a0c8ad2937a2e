import pytest

from conftest import FakeChannel
from voice_call.models.message_schemas import VoiceInfo
from voice_call.speech.output import VoiceOutput
from voice_call.speech.voices import select_voice


def voice(name, lang="en-US", local=True):
    return VoiceInfo(name=name, lang=lang, localService=local)


def test_prefers_natural_sounding_names():
    voices = [voice("Alex"), voice("Microsoft Aria Online (Natural)"), voice("Fred")]

    assert select_voice(voices).name == "Microsoft Aria Online (Natural)"


def test_prefers_english_cloud_voice():
    voices = [voice("Thomas", "fr-FR", local=False), voice("Daniel"), voice("Karen", "en-AU", local=False)]

    assert select_voice(voices).name == "Karen"


def test_falls_back_to_any_english_voice():
    voices = [voice("Thomas", "fr-FR"), voice("Daniel", "en-GB")]

    assert select_voice(voices).name == "Daniel"


def test_falls_back_to_first_voice():
    voices = [voice("Thomas", "fr-FR"), voice("Anna", "de-DE")]

    assert select_voice(voices).name == "Thomas"


def test_no_voices():
    assert select_voice([]) is None


@pytest.mark.asyncio
async def test_output_speaks_with_selected_voice():
    channel = FakeChannel()
    output = VoiceOutput(channel)
    output.update_voices([voice("Daniel", "en-GB"), voice("Samantha")])

    await output.speak("Hello there")

    command = channel.sent[0]
    assert command.type == "synthesis.speak"
    assert command.voice == "Samantha"
    assert command.rate == pytest.approx(1.05)
    assert command.pitch == pytest.approx(1.0)
    assert command.volume == pytest.approx(1.0)


@pytest.mark.asyncio
async def test_output_uses_browser_default_without_voices():
    channel = FakeChannel()
    output = VoiceOutput(channel)

    await output.speak("Hello there")

    assert channel.sent[0].voice is None
