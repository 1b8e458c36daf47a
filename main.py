import enum
import logging
import os

from rich.pretty import pprint

from prefixargs import *
from prefixargs.converters import constant, index, matching, text

__prog__ = "contacts"
__codes__ = {FaultCode.INVALID_VALUE: "E-VALUE"}
__docs__ = {
    FaultCode.PREAMBLE_IDENTIFIER_COUNT: "identify the student by its list index or its student ID, not both",
}


class Attendance(enum.Enum):
    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"
    EXCUSED = "excused"


student_id = matching(r"A\d{7}[A-Z]", "student IDs should look like A0000000Y")

NAME = required("n/", "NAME", type=text)
PHONE = required("p/", "PHONE", type=matching(r"\d{3,}", "phone numbers should only contain digits, at least 3"))
EMAIL = required("e/", "EMAIL", type=matching(r"[^@\s]+@[^@\s]+", "emails should be of the format local-part@domain"))
STUDENT = required("s/", "STUDENT_ID", type=student_id)
TAGS = zero_or_more("t/", "TAG", type=text)

INDEX = optional_preamble("INDEX", type=index)
IDENTIFIER = optional_preamble("STUDENT_ID", type=student_id)
FLAGS = [
    optional(prefix, status.name, type=constant(status))
    for prefix, status in zip(("p/", "a/", "l/", "e/"), Attendance)
]

registry = Registry(shell=True, fancy=True)
registry.command("add").register_options(NAME, PHONE, EMAIL, STUDENT, TAGS)
registry.command("mark").register_options(INDEX, IDENTIFIER, *FLAGS) \
    .require_single_preamble() \
    .register_exclusive_group(*FLAGS)
registry.command("delete").register_options(variadic_preamble("INDEX", type=index))


if __name__ == '__main__':
    logging.basicConfig(level=os.environ.get("PREFIXARGS_LOG", "WARNING").upper())

    for line in (
        "add n/Alice Tan p/98765432 e/alice@example.com s/A0123456X t/tutor t/year2",
        "add n/Bob p/123",
        "mark 2 l/",
        "mark A0123456X p/ a/",
        "mark",
        "delete 1 3 x",
        "dlete 1",
    ):
        pprint(registry.parse_line(line))
