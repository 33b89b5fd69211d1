from riskscan.domain.text_cleaner import NO_TEXT_SENTINEL, clean_text, join_texts


def test_clean_text_strips_ui_chrome() -> None:
    raw = (
        "iMessage\n"
        "Today 9:41 AM\n"
        "You never listen to me\n"
        "Delivered\n"
        "\n"
        "Yesterday\n"
        "I read your message at 10:32\n"
        "Read 10:33\n"
    )

    cleaned = clean_text(raw)

    assert "iMessage" not in cleaned
    assert "Delivered" not in cleaned
    assert "Today" not in cleaned
    assert "Yesterday" not in cleaned
    assert "9:41" not in cleaned
    assert "10:32" not in cleaned
    assert "You never listen to me" in cleaned
    assert "I read your message at" in cleaned


def test_clean_text_keeps_conversation_words_that_look_like_chrome() -> None:
    cleaned = clean_text("Did you read it today?\nSignal me later")

    assert cleaned == "Did you read it today?\nSignal me later"


def test_clean_text_collapses_blank_runs() -> None:
    cleaned = clean_text("first\n\n\n\n\nsecond\nWhatsApp\n\n\nthird")

    assert "\n\n\n" not in cleaned
    assert cleaned.startswith("first\n\nsecond")
    assert cleaned.endswith("third")


def test_clean_text_returns_sentinel_for_empty_output() -> None:
    assert clean_text("") == NO_TEXT_SENTINEL
    assert clean_text(None) == NO_TEXT_SENTINEL
    assert clean_text("  \n Delivered \n 12:04 PM \n Seen 12:05 PM") == NO_TEXT_SENTINEL


def test_join_texts_uses_blank_lines_and_skips_empty() -> None:
    assert join_texts(["a", "", "b"]) == "a\n\nb"


def test_clean_text_keeps_one_word_messages() -> None:
    cleaned = clean_text("where are you\nNow.\n...\nSeen\nsent")

    assert cleaned == "where are you\nNow.\n...\nSeen\nsent"


def test_clean_text_drops_status_words_next_to_times() -> None:
    cleaned = clean_text("I'm leaving\nSent 9:41 PM\nSeen at 9:45\nMon 10:02\nok")

    assert cleaned == "I'm leaving\n\nok"
