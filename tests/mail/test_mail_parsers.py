from __future__ import annotations

from email.message import EmailMessage

from src.student_attendance.student_attendance.mail.parsers import html_to_text, parse_message, parse_summary


def _raw_message(*, html: bool = False) -> bytes:
    msg = EmailMessage()
    msg["From"] = "Иван Иванов <Ivanov@Example.com>"
    msg["To"] = "lecturer@example.com"
    msg["Subject"] = "Лабораторная работа 1"
    msg["Message-ID"] = "<abc@example.com>"
    if html:
        msg.set_content("<html><body><p>Здравствуйте!</p><p>Работа во вложении</p></body></html>", subtype="html")
    else:
        msg.set_content("Здравствуйте!\nРабота во вложении\n")
    msg.add_attachment(
        b"PK\x03\x04",
        maintype="application",
        subtype="octet-stream",
        filename="Лабораторная работа 1.docx",
    )
    return msg.as_bytes()


def test_parse_message_extracts_fields_and_attachments():
    message = parse_message("42", _raw_message())

    assert message.uid == "42"
    assert message.sender == "Ivanov@Example.com"
    assert message.subject == "Лабораторная работа 1"
    assert message.message_id == "<abc@example.com>"
    assert message.text_body == "Здравствуйте!\nРабота во вложении"
    assert [a.filename for a in message.attachments] == ["Лабораторная работа 1.docx"]
    assert message.attachments[0].payload == b"PK\x03\x04"


def test_parse_message_converts_html_body():
    message = parse_message("1", _raw_message(html=True))

    assert message.text_body == "Здравствуйте!\nРабота во вложении"


def test_parse_message_without_body_or_attachments():
    msg = EmailMessage()
    msg["From"] = "a@example.com"
    msg["Subject"] = "empty"

    message = parse_message("1", msg.as_bytes())

    assert message.attachments == []
    assert message.message_id == ""


def test_parse_summary_reads_header_block():
    header = (
        "From: =?utf-8?b?0JjQstCw0L0=?= <ivanov@example.com>\r\n"
        "Subject: =?utf-8?b?0KHQtNCw0YfQsA==?=\r\n"
        "Message-ID: <m1@example.com>\r\n\r\n"
    ).encode("ascii")

    summary = parse_summary("9", header)

    assert summary.uid == "9"
    assert summary.sender == "ivanov@example.com"
    assert summary.subject == "Сдача"
    assert summary.message_id == "<m1@example.com>"


def test_html_to_text():
    assert html_to_text("<div>a<br>b</div><script></script>") == "a\nb"
