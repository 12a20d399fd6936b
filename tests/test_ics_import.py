from datetime import datetime

from backend.ics_import import events_from_ical


def _calendar(*events):
    lines = ["BEGIN:VCALENDAR", "VERSION:2.0", "PRODID:-//test//EN"]
    for event in events:
        lines.append("BEGIN:VEVENT")
        lines.extend(event)
        lines.append("END:VEVENT")
    lines.append("END:VCALENDAR")
    return "\r\n".join(lines) + "\r\n"


def test_timed_event():
    options = events_from_ical(_calendar([
        "UID:abc",
        "SUMMARY:Dentist",
        "DTSTART:20240214T090000",
        "DTEND:20240214T100000",
    ]))

    assert options == [{
        'title': "Dentist",
        'start_date': datetime(2024, 2, 14, 9),
        'event_id': "abc",
        'finish_date': datetime(2024, 2, 14, 10),
    }]


def test_duration_is_converted_to_minutes():
    [options] = events_from_ical(_calendar([
        "SUMMARY:Call",
        "DTSTART:20240214T090000",
        "DURATION:PT45M",
    ]))

    assert options['duration'] == 45
    assert 'finish_date' not in options
    assert 'event_id' not in options


def test_all_day_event_without_end_lasts_one_day():
    [options] = events_from_ical(_calendar([
        "SUMMARY:Holiday",
        "DTSTART;VALUE=DATE:20240214",
    ]))

    assert options['start_date'] == datetime(2024, 2, 14)
    assert options['finish_date'] == datetime(2024, 2, 15)


def test_utc_times_are_converted():
    [options] = events_from_ical(_calendar([
        "SUMMARY:Remote",
        "DTSTART:20240214T090000Z",
        "DTEND:20240214T100000Z",
    ]), timezone_name="Europe/Berlin")

    assert options['start_date'] == datetime(2024, 2, 14, 10)
    assert options['finish_date'] == datetime(2024, 2, 14, 11)


def test_event_without_start_is_skipped():
    result = events_from_ical(_calendar(
        ["SUMMARY:Broken"],
        ["SUMMARY:Fine", "DTSTART:20240214T090000"],
    ))

    assert [o['title'] for o in result] == ["Fine"]


def test_missing_summary_gets_placeholder():
    [options] = events_from_ical(_calendar(["DTSTART:20240214T090000"]))
    assert options['title'] == "Untitled"
