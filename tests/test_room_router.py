import asyncio

from devmeet.backend.websocket import RoomRouter, room_id


class FakeConnection:
    def __init__(self, name, fail=False):
        self.name = name
        self.fail = fail
        self.frames = []

    async def send_json(self, data):
        if self.fail:
            raise RuntimeError("connection closed")
        # Yield so concurrent senders actually interleave
        await asyncio.sleep(0)
        self.frames.append(data)


def test_room_id_is_symmetric():
    assert room_id(3, 12) == room_id(12, 3) == "12-3"
    assert room_id("a", "b") == "a-b"


async def test_message_reaches_both_members_including_sender():
    router = RoomRouter()
    alice, bob, eve = FakeConnection("alice"), FakeConnection("bob"), FakeConnection("eve")
    router.join_room(alice, 1, 2)
    router.join_room(bob, 2, 1)
    router.join_room(eve, 3, 1)

    room = await router.send_message({"senderId": 1, "receiverId": 2, "text": "hi"})

    assert room == "1-2"
    expected = {"event": "receiveMessage", "data": {"senderId": 1, "receiverId": 2, "text": "hi"}}
    assert alice.frames == [expected]
    assert bob.frames == [expected]
    assert eve.frames == []


async def test_typing_excludes_caller():
    router = RoomRouter()
    alice, bob = FakeConnection("alice"), FakeConnection("bob")
    router.join_room(alice, 1, 2)
    router.join_room(bob, 2, 1)

    await router.set_typing(alice, 1, 2, True)

    assert alice.frames == []
    assert bob.frames == [{"event": "userTyping", "data": {"userId": 1, "isTyping": True}}]


async def test_one_senders_messages_keep_order():
    router = RoomRouter()
    alice, bob = FakeConnection("alice"), FakeConnection("bob")
    router.join_room(alice, 1, 2)
    router.join_room(bob, 2, 1)

    await asyncio.gather(*(
        router.send_message({"senderId": 1, "receiverId": 2, "seq": i}) for i in range(20)
    ))

    assert [f["data"]["seq"] for f in bob.frames] == list(range(20))


async def test_disconnect_drops_memberships():
    router = RoomRouter()
    alice, bob = FakeConnection("alice"), FakeConnection("bob")
    router.join_room(alice, 1, 2)
    router.join_room(alice, 1, 3)
    router.join_room(bob, 2, 1)

    router.disconnect(alice)

    assert router.rooms_of(alice) == []
    assert router.members("1-2") == [bob]
    assert router.members("1-3") == []
    await router.send_message({"senderId": 2, "receiverId": 1, "text": "still there?"})
    assert alice.frames == []


async def test_dead_connection_is_dropped():
    router = RoomRouter()
    alice, dead = FakeConnection("alice"), FakeConnection("dead", fail=True)
    router.join_room(alice, 1, 2)
    router.join_room(dead, 2, 1)

    await router.send_message({"senderId": 1, "receiverId": 2, "text": "hello"})

    assert len(alice.frames) == 1
    assert router.members("1-2") == [alice]
