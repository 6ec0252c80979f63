"""
End-to-end tests of the topic lifecycle against a real (in-memory) database.
"""

from datetime import datetime, timezone

import pytest
from sqlalchemy.future import select

from src.common.errors import ErrorKind, ForumError
from src.common.pagination import PageParams
from src.common.utils.global_messages import GlobalMessages
from src.models.models import Reply, Topic, TopicStatus
from src.modules.courses import course_service
from src.modules.topics import topic_lifecycle_service as lifecycle
from src.modules.topics import topic_rules

SOLUTION = "Reinstala el JDK y limpia la cache de Maven."


@pytest.fixture
async def registered(test_async_db, principal, topic_payload):
    p = topic_payload
    return await lifecycle.register_topic(
        p["title"], p["body"], p["author"], p["course_id"], principal, test_async_db
    )


class TestRegisterTopic:
    async def test_register_then_get_round_trip(self, test_async_db, registered):
        detail = await lifecycle.get_topic(registered.id, test_async_db)

        assert detail.status is TopicStatus.OPEN
        assert detail.solution is None
        assert detail.course_name == "Java"
        assert detail.title == registered.title

    async def test_duplicate_title_and_body_is_conflict(self, test_async_db, principal, topic_payload, registered):
        p = topic_payload

        with pytest.raises(ForumError) as exc_info:
            await lifecycle.register_topic(p["title"], p["body"], "Luis", p["course_id"], principal, test_async_db)

        assert exc_info.value.kind is ErrorKind.CONFLICT

    @pytest.mark.parametrize("course_id", ["0", "-3", "abc"])
    async def test_invalid_course_id_is_invalid_input(self, test_async_db, principal, topic_payload, course_id):
        p = topic_payload

        with pytest.raises(ForumError) as exc_info:
            await lifecycle.register_topic(p["title"], p["body"], p["author"], course_id, principal, test_async_db)

        assert exc_info.value.kind is ErrorKind.INVALID_INPUT

    async def test_string_course_id_is_accepted(self, test_async_db, principal, topic_payload):
        p = topic_payload

        detail = await lifecycle.register_topic(
            p["title"], p["body"], p["author"], str(p["course_id"]), principal, test_async_db
        )

        assert detail.id is not None

    async def test_short_body_violates_quality_rule(self, test_async_db, principal, topic_payload):
        p = topic_payload

        with pytest.raises(ForumError) as exc_info:
            await lifecycle.register_topic(p["title"], "short", p["author"], p["course_id"], principal, test_async_db)

        assert exc_info.value.code == topic_rules.MESSAGE_TOO_SHORT


class TestAcceptSolution:
    async def test_accept_resolves_topic(self, test_async_db, principal, registered):
        detail = await lifecycle.accept_solution(registered.id, SOLUTION, "Luis", "true", principal, test_async_db)

        assert detail.status is TopicStatus.RESOLVED
        assert detail.solution == SOLUTION

    async def test_self_solution_is_rule_violation(self, test_async_db, principal, registered):
        with pytest.raises(ForumError) as exc_info:
            await lifecycle.accept_solution(registered.id, SOLUTION, "ana", "true", principal, test_async_db)

        assert exc_info.value.kind is ErrorKind.RULE_VIOLATION
        assert exc_info.value.code == topic_rules.SELF_SOLUTION
        detail = await lifecycle.get_topic(registered.id, test_async_db)
        assert detail.status is TopicStatus.OPEN

    async def test_second_solution_is_rejected_and_topic_stays_resolved(self, test_async_db, principal, registered):
        await lifecycle.accept_solution(registered.id, SOLUTION, "Luis", "true", principal, test_async_db)

        with pytest.raises(ForumError) as exc_info:
            await lifecycle.accept_solution(
                registered.id, "Otra respuesta que tambien es larga.", "Marta", "true", principal, test_async_db
            )

        assert exc_info.value.code == topic_rules.SOLUTION_EXISTS
        detail = await lifecycle.get_topic_with_solution(registered.id, test_async_db)
        assert detail.status is TopicStatus.RESOLVED
        assert detail.solution == SOLUTION
        solutions = await lifecycle.list_solutions(registered.id, test_async_db)
        assert len(solutions) == 1

    async def test_short_solution_message_is_rejected(self, test_async_db, principal, registered):
        with pytest.raises(ForumError) as exc_info:
            await lifecycle.accept_solution(registered.id, "short", "Luis", "true", principal, test_async_db)

        assert exc_info.value.code == topic_rules.MESSAGE_TOO_SHORT

    async def test_invalid_flag_is_invalid_input(self, test_async_db, principal, registered):
        with pytest.raises(ForumError) as exc_info:
            await lifecycle.accept_solution(registered.id, SOLUTION, "Luis", "maybe", principal, test_async_db)

        assert exc_info.value.message == GlobalMessages.SOLUTION_FLAG_INVALID

    async def test_solution_requires_author(self, test_async_db, principal, registered):
        with pytest.raises(ForumError) as exc_info:
            await lifecycle.accept_solution(registered.id, SOLUTION, "  ", "true", principal, test_async_db)

        assert exc_info.value.message == GlobalMessages.SOLUTION_AUTHOR_REQUIRED

    async def test_unflagged_reply_leaves_topic_open(self, test_async_db, principal, registered):
        detail = await lifecycle.accept_solution(registered.id, SOLUTION, "Luis", "false", principal, test_async_db)

        assert detail.status is TopicStatus.OPEN
        assert detail.solution is None

    async def test_missing_topic_is_not_found(self, test_async_db, principal):
        with pytest.raises(ForumError) as exc_info:
            await lifecycle.accept_solution(999, SOLUTION, "Luis", "true", principal, test_async_db)

        assert exc_info.value.kind is ErrorKind.NOT_FOUND


class TestPostReply:
    async def test_blank_author_falls_back_to_principal(self, test_async_db, principal, registered):
        reply = await lifecycle.post_reply(registered.id, SOLUTION, " ", "false", principal, test_async_db)

        assert reply.author == principal.login
        assert reply.is_solution is False

    async def test_failed_reply_is_rolled_back(self, test_async_db, principal, registered):
        with pytest.raises(ForumError):
            await lifecycle.post_reply(registered.id, "short", "Luis", "false", principal, test_async_db)

        result = await test_async_db.execute(select(Reply).where(Reply.topic_id == registered.id))
        assert result.scalars().all() == []


class TestUpdateAndDelete:
    async def test_update_requires_id(self, test_async_db, principal):
        with pytest.raises(ForumError) as exc_info:
            await lifecycle.update_topic({"id": None, "title": "Nuevo titulo largo"}, principal, test_async_db)

        assert exc_info.value.message == GlobalMessages.TOPIC_ID_INVALID

    async def test_partial_update(self, test_async_db, principal, registered):
        detail = await lifecycle.update_topic(
            {"id": registered.id, "title": "Nuevo titulo largo", "body": None, "author": None},
            principal,
            test_async_db,
        )

        assert detail.title == "Nuevo titulo largo"
        assert detail.body == registered.body
        assert detail.author == registered.author

    async def test_update_with_short_body_is_rejected(self, test_async_db, principal, registered):
        with pytest.raises(ForumError) as exc_info:
            await lifecycle.update_topic({"id": registered.id, "body": "short"}, principal, test_async_db)

        assert exc_info.value.code == topic_rules.MESSAGE_TOO_SHORT

    async def test_double_delete_does_not_raise(self, test_async_db, principal, registered):
        await lifecycle.delete_topic(registered.id, principal, test_async_db)
        await lifecycle.delete_topic(str(registered.id), principal, test_async_db)

        result = await test_async_db.execute(select(Topic.active).where(Topic.id == registered.id))
        assert result.scalar_one() is False
        with pytest.raises(ForumError) as exc_info:
            await lifecycle.get_topic(registered.id, test_async_db)
        assert exc_info.value.kind is ErrorKind.NOT_FOUND

    async def test_delete_with_invalid_id_is_invalid_input(self, test_async_db, principal):
        with pytest.raises(ForumError) as exc_info:
            await lifecycle.delete_topic("0", principal, test_async_db)

        assert exc_info.value.kind is ErrorKind.INVALID_INPUT


class TestSearchAndListing:
    async def test_search_unknown_course_is_not_found(self, test_async_db):
        with pytest.raises(ForumError) as exc_info:
            await lifecycle.search_by_filter("Nonexistent Course", "2024", PageParams(), test_async_db)

        assert exc_info.value.kind is ErrorKind.NOT_FOUND
        assert exc_info.value.message == GlobalMessages.COURSE_NAME_UNKNOWN

    async def test_search_known_course_without_topics_in_year(self, test_async_db, registered):
        with pytest.raises(ForumError) as exc_info:
            await lifecycle.search_by_filter("java", "1999", PageParams(), test_async_db)

        assert exc_info.value.message == GlobalMessages.NO_TOPICS_FOR_FILTER.format(course_name="java", year=1999)

    async def test_search_finds_topic(self, test_async_db, registered):
        year = str(datetime.now(timezone.utc).year)

        page = await lifecycle.search_by_filter(" JAVA ", year, PageParams(), test_async_db)

        assert [item.id for item in page.content] == [registered.id]
        assert page.content[0].course_category == "Programacion"

    @pytest.mark.parametrize("course_name, year, message", [
        (None, "2024", GlobalMessages.COURSE_NAME_REQUIRED),
        ("Java", None, GlobalMessages.YEAR_REQUIRED),
        ("Java", "20a4", GlobalMessages.YEAR_NOT_DIGITS),
    ])
    async def test_search_requires_both_filters(self, test_async_db, course_name, year, message):
        with pytest.raises(ForumError) as exc_info:
            await lifecycle.search_by_filter(course_name, year, PageParams(), test_async_db)

        assert exc_info.value.message == message

    async def test_list_resolved_only_returns_resolved_topics(self, test_async_db, principal, topic_payload, registered):
        p = topic_payload
        other = await lifecycle.register_topic(
            "Otro tema sin resolver", p["body"], p["author"], p["course_id"], principal, test_async_db
        )
        await lifecycle.accept_solution(registered.id, SOLUTION, "Luis", "true", principal, test_async_db)

        resolved = await lifecycle.list_resolved(PageParams(), test_async_db)
        all_topics = await lifecycle.list_topics(PageParams(), test_async_db)
        detailed = await lifecycle.list_resolved_with_solution(PageParams(), test_async_db)

        assert [t.id for t in resolved.content] == [registered.id]
        assert {t.id for t in all_topics.content} == {registered.id, other.id}
        assert detailed.content[0].solution_message == SOLUTION
        assert detailed.content[0].solution_author == "Luis"

    async def test_list_replies(self, test_async_db, principal, registered):
        await lifecycle.post_reply(registered.id, SOLUTION, "Luis", "false", principal, test_async_db)

        replies = await lifecycle.list_replies(registered.id, test_async_db)

        assert [r.author for r in replies] == ["Luis"]

    async def test_search_with_oversized_year_is_invalid_input(self, test_async_db, registered):
        with pytest.raises(ForumError) as exc_info:
            await lifecycle.search_by_filter("Java", "99999999999999999999", PageParams(), test_async_db)

        assert exc_info.value.kind is ErrorKind.INVALID_INPUT
        assert exc_info.value.message == GlobalMessages.YEAR_OUT_OF_RANGE.format(min_year=1, max_year=9999)

    async def test_accented_course_search_and_not_found_message_agree(self, test_async_db, principal):
        course = await course_service.register("Programación", "Basico", test_async_db)
        await test_async_db.commit()
        await lifecycle.register_topic(
            "Duda sobre bucles for", "No entiendo como funciona el bucle for.", "Ana", course.id, principal, test_async_db
        )
        year = str(datetime.now(timezone.utc).year)

        page = await lifecycle.search_by_filter("PROGRAMACIÓN", year, PageParams(), test_async_db)
        with pytest.raises(ForumError) as exc_info:
            await lifecycle.search_by_filter("programacion", year, PageParams(), test_async_db)

        assert page.total_elements == 1
        assert exc_info.value.message == GlobalMessages.COURSE_NAME_UNKNOWN
