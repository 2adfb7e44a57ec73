from debian_setup.ui import print_error


def test_messages_are_printed_literally(capsys):
    print_error("cannot open /tmp/[b]odd[/b] or [/oops]")

    out = capsys.readouterr().out
    assert "/tmp/[b]odd[/b] or [/oops]" in out
