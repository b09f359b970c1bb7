"""Current rule generation: class-scoped collections and user documents.

Each grant is one 'allow' statement; a block may declare several grants for
the same operation and they combine with OR. Nothing is inherited down the
tree, so every subcollection lists its own grants.
"""

from taskmaster.application.rules.helpers import CURRENT_HELPERS
from taskmaster.domain.entities.rule import Grant, RuleBlock, RuleTable, grant
from taskmaster.domain.enums import (
    WRITE_OPERATIONS,
    ApprovalStatus,
    Operation,
    RuleGeneration,
)
from taskmaster.domain.expressions import (
    ACTOR,
    Expr,
    all_of,
    any_of,
    call,
    contains,
    eq,
    has,
    le,
    not_,
    param,
    request,
    resource,
    size,
)
from taskmaster.domain.value_objects.core import PathPattern

READ = Operation.READ
CREATE = Operation.CREATE
UPDATE = Operation.UPDATE
DELETE = Operation.DELETE
UPDATE_DELETE = (UPDATE, DELETE)

CLASS = "classes/{classId}"

# users/{userId}.photoBase64 may not exceed 1 MiB.
MAX_PHOTO_BYTES = 1024 * 1024

signed_in = call("isSignedIn")
is_owner = call("isClassOwner", param("classId"))
is_member = call("isMember", param("classId"))
is_admin = call("isAdmin", param("classId"))
is_teacher = call("isTeacher", param("classId"))
member_or_admin = any_of(is_member, is_admin)


def _created_by_actor() -> Expr:
    return eq(resource("createdBy"), ACTOR)


def _block(pattern: str, *grants: Grant) -> RuleBlock:
    return RuleBlock(PathPattern(pattern), tuple(grants))


def _class_blocks() -> list[RuleBlock]:
    return [
        _block(
            CLASS,
            grant("class.read", READ, signed_in),
            grant(
                "class.create",
                CREATE,
                all_of(signed_in, eq(request("createdBy"), ACTOR)),
            ),
            # No admin override: only the creator may change or remove a class.
            grant("class.owner", UPDATE_DELETE, _created_by_actor()),
        ),
        _block(
            f"{CLASS}/members/{{memberId}}",
            grant("member.read", READ, signed_in),
            grant(
                "member.join",
                CREATE,
                any_of(eq(param("memberId"), ACTOR), eq(request("userId"), ACTOR)),
            ),
            grant("member.admin", WRITE_OPERATIONS, is_admin),
            grant("member.leave", DELETE, eq(resource("userId"), ACTOR)),
        ),
        _block(
            f"{CLASS}/subjects/{{subjectId}}",
            grant("subject.read", READ, member_or_admin),
            grant("subject.create", CREATE, is_admin),
            grant("subject.creator", UPDATE_DELETE, _created_by_actor()),
            grant("subject.class_owner", UPDATE_DELETE, is_owner),
            # Teachers listed on the subject may edit it but never delete it.
            grant(
                "subject.teacher",
                UPDATE,
                call("isTeacherForSubject", param("classId"), param("subjectId")),
            ),
        ),
    ]


def _assignment_blocks() -> list[RuleBlock]:
    assignment = f"{CLASS}/assignments/{{assignmentId}}"
    return [
        _block(
            assignment,
            grant("assignment.read", READ, member_or_admin),
            grant("assignment.admin", WRITE_OPERATIONS, is_admin),
            grant(
                "assignment.subject_teacher_create",
                CREATE,
                call("isTeacherForSubject", param("classId"), request("subjectId")),
            ),
            grant("assignment.creator", UPDATE_DELETE, _created_by_actor()),
            grant(
                "assignment.subject_teacher",
                UPDATE,
                call("isTeacherForSubject", param("classId"), resource("subjectId")),
            ),
        ),
        _block(
            f"{assignment}/comments/{{commentId}}",
            grant("comment.read", READ, member_or_admin),
            grant(
                "comment.create",
                CREATE,
                all_of(member_or_admin, eq(request("userId"), ACTOR)),
            ),
            grant("comment.author", UPDATE_DELETE, eq(resource("userId"), ACTOR)),
            grant("comment.admin", DELETE, is_admin),
        ),
        _block(
            f"{CLASS}/experience/{{entryId}}",
            grant("experience.read", READ, member_or_admin),
            grant(
                "experience.create",
                CREATE,
                all_of(is_member, eq(request("userId"), ACTOR)),
            ),
            grant("experience.admin", UPDATE_DELETE, is_admin),
        ),
        _block(
            f"{CLASS}/aiMaterials/{{materialId}}",
            grant("ai_material.read", READ, member_or_admin),
            grant("ai_material.create", CREATE, any_of(is_admin, is_teacher)),
            grant("ai_material.admin", UPDATE_DELETE, is_admin),
            grant("ai_material.creator", UPDATE_DELETE, _created_by_actor()),
        ),
    ]


def _media_blocks() -> list[RuleBlock]:
    blocks = []
    for collection, prefix in (("gallery", "gallery"), ("albums", "album")):
        blocks.append(
            _block(
                f"{CLASS}/{collection}/{{itemId}}",
                grant(f"{prefix}.read", READ, member_or_admin),
                grant(f"{prefix}.create", CREATE, member_or_admin),
                grant(f"{prefix}.creator", UPDATE_DELETE, _created_by_actor()),
                grant(f"{prefix}.admin", UPDATE_DELETE, is_admin),
            )
        )
    blocks.append(
        _block(
            f"{CLASS}/featuredImages/{{itemId}}",
            grant("featured_image.read", READ, member_or_admin),
            grant("featured_image.admin", WRITE_OPERATIONS, is_admin),
        )
    )
    blocks.append(
        _block(
            f"{CLASS}/galleryApprovals/{{approvalId}}",
            grant("gallery_approval.read", READ, member_or_admin),
            grant("gallery_approval.create", CREATE, member_or_admin),
            grant("gallery_approval.admin", UPDATE_DELETE, is_admin),
            grant("gallery_approval.teacher", UPDATE_DELETE, is_teacher),
            grant("gallery_approval.withdraw", DELETE, _created_by_actor()),
        )
    )
    return blocks


def _completion_approval_block() -> RuleBlock:
    # Five independent ways to review a completion; any one is enough.
    return _block(
        f"{CLASS}/completionApprovals/{{approvalId}}",
        grant("completion_approval.read", READ, member_or_admin),
        grant(
            "completion_approval.request",
            CREATE,
            all_of(is_member, eq(request("userId"), ACTOR)),
        ),
        grant("completion_approval.admin", UPDATE_DELETE, is_admin),
        grant("completion_approval.teacher", UPDATE_DELETE, is_teacher),
        grant(
            "completion_approval.subject_teacher",
            UPDATE_DELETE,
            contains(resource("subjectTeachers"), ACTOR),
        ),
        grant(
            "completion_approval.approver",
            UPDATE_DELETE,
            eq(resource("approvedBy"), ACTOR),
        ),
        grant(
            "completion_approval.grader",
            UPDATE_DELETE,
            eq(resource("gradedBy"), ACTOR),
        ),
        grant(
            "completion_approval.withdraw",
            DELETE,
            all_of(
                eq(resource("userId"), ACTOR),
                eq(resource("status"), ApprovalStatus.PENDING.value),
            ),
        ),
    )


def _user_blocks() -> list[RuleBlock]:
    is_self = eq(param("userId"), ACTOR)
    photo_within_limit = any_of(
        not_(has("request", "photoBase64")),
        le(size(request("photoBase64")), MAX_PHOTO_BYTES),
    )
    completed = "users/{userId}/completedAssignments/{completionId}"
    return [
        _block(
            "users/{userId}",
            grant("user.read", READ, signed_in),
            grant("user.self_write", (CREATE, UPDATE), all_of(is_self, photo_within_limit)),
            grant("user.self_delete", DELETE, is_self),
        ),
        _block(
            completed,
            grant("completed_assignment.self", (READ, CREATE, UPDATE, DELETE), is_self),
            grant(
                "completed_assignment.class_admin_read",
                READ,
                call("isAdmin", resource("classId")),
            ),
            grant(
                "completed_assignment.class_teacher_read",
                READ,
                call("isTeacher", resource("classId")),
            ),
            grant(
                "completed_assignment.class_admin_create",
                CREATE,
                call("isAdmin", request("classId")),
            ),
            grant(
                "completed_assignment.class_teacher_create",
                CREATE,
                call("isTeacher", request("classId")),
            ),
            grant(
                "completed_assignment.class_admin",
                UPDATE_DELETE,
                call("isAdmin", resource("classId")),
            ),
            grant(
                "completed_assignment.class_teacher",
                UPDATE,
                call("isTeacher", resource("classId")),
            ),
            grant(
                "completed_assignment.approver",
                UPDATE,
                eq(resource("approvedBy"), ACTOR),
            ),
            grant(
                "completed_assignment.teacher_of_record",
                UPDATE,
                eq(resource("teacherId"), ACTOR),
            ),
            grant(
                "completed_assignment.grader",
                UPDATE,
                eq(resource("gradedBy"), ACTOR),
            ),
        ),
    ]


def build_current_table() -> RuleTable:
    """Build the current-generation table (validated on construction)."""
    blocks = (
        _class_blocks()
        + _assignment_blocks()
        + _media_blocks()
        + [_completion_approval_block()]
        + _user_blocks()
    )
    return RuleTable(RuleGeneration.CURRENT, tuple(blocks), CURRENT_HELPERS)
