"""Named helper predicates shared by the rule tables.

Every helper takes the class id explicitly, so the same definition serves
class-scoped paths (classes/{classId}/...) and documents that only carry a
classId field (completed assignments, legacy AI materials).

Member records are looked up at classes/{classId}/members/{actor}; see
DESIGN.md for the keying decision.
"""

from taskmaster.domain.entities.rule import HelperDefinition
from taskmaster.domain.enums import MemberRole
from taskmaster.domain.expressions import (
    ACTOR,
    Expr,
    LookupPath,
    all_of,
    any_of,
    arg,
    call,
    contains,
    doc,
    eq,
    exists,
    get_field,
    not_null,
)


def class_doc() -> LookupPath:
    return doc("classes", arg("classId"))


def member_doc() -> LookupPath:
    return doc("classes", arg("classId"), "members", ACTOR)


def subject_doc() -> LookupPath:
    return doc("classes", arg("classId"), "subjects", arg("subjectId"))


def _member_role_in(*roles: MemberRole) -> Expr:
    member = member_doc()
    role = get_field(member, "role")
    if len(roles) == 1:
        return all_of(exists(member), eq(role, roles[0].value))
    return all_of(exists(member), contains(tuple(r.value for r in roles), role))


IS_SIGNED_IN = HelperDefinition("isSignedIn", (), not_null(ACTOR))

IS_CLASS_OWNER = HelperDefinition(
    "isClassOwner",
    ("classId",),
    all_of(exists(class_doc()), eq(get_field(class_doc(), "createdBy"), ACTOR)),
)

IS_MEMBER = HelperDefinition("isMember", ("classId",), exists(member_doc()))

# Current generation: owners and admins only.
IS_ADMIN = HelperDefinition(
    "isAdmin",
    ("classId",),
    any_of(call("isClassOwner", arg("classId")), _member_role_in(MemberRole.ADMIN)),
)

# Legacy generation: teachers count as admins.
IS_ADMIN_INCLUDING_TEACHERS = HelperDefinition(
    "isAdmin",
    ("classId",),
    any_of(
        call("isClassOwner", arg("classId")),
        _member_role_in(MemberRole.ADMIN, MemberRole.TEACHER),
    ),
)

IS_TEACHER = HelperDefinition(
    "isTeacher", ("classId",), _member_role_in(MemberRole.TEACHER)
)

IS_TEACHER_FOR_SUBJECT = HelperDefinition(
    "isTeacherForSubject",
    ("classId", "subjectId"),
    all_of(
        exists(subject_doc()),
        call("isTeacher", arg("classId")),
        not_null(get_field(subject_doc(), "teachers")),
        contains(get_field(subject_doc(), "teachers"), ACTOR),
    ),
)


def _by_name(*helpers: HelperDefinition) -> dict[str, HelperDefinition]:
    return {h.name: h for h in helpers}


CURRENT_HELPERS = _by_name(
    IS_SIGNED_IN,
    IS_CLASS_OWNER,
    IS_MEMBER,
    IS_ADMIN,
    IS_TEACHER,
    IS_TEACHER_FOR_SUBJECT,
)

LEGACY_HELPERS = _by_name(
    IS_SIGNED_IN,
    IS_CLASS_OWNER,
    IS_MEMBER,
    IS_ADMIN_INCLUDING_TEACHERS,
    IS_TEACHER,
)
