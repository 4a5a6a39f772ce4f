import asyncio

from product_identity.sequencing import ResolutionSequencer


def test_latest_token_wins():
    seq = ResolutionSequencer()
    t1 = seq.issue(0)
    t2 = seq.issue(0)
    assert t2 == t1 + 1
    assert not seq.is_current(0, t1)
    assert seq.accept(0, t1, ["stale"]) is None
    assert seq.accept(0, t2, ["fresh"]) == ["fresh"]


def test_record_keys_are_independent():
    seq = ResolutionSequencer()
    a = seq.issue("row-0")
    b = seq.issue("row-1")
    assert seq.is_current("row-0", a)
    assert seq.is_current("row-1", b)


def test_forget_makes_in_flight_response_stale():
    seq = ResolutionSequencer()
    t = seq.issue(3)
    seq.forget(3)
    assert not seq.is_current(3, t)


def test_run_discards_out_of_order_response():
    async def go():
        seq = ResolutionSequencer()
        release = asyncio.Event()

        async def slow():
            await release.wait()
            return "old"

        async def fast():
            return "new"

        first = asyncio.create_task(seq.run(0, slow()))
        await asyncio.sleep(0)  # first call takes its token
        second = await seq.run(0, fast())
        release.set()
        return await first, second

    first, second = asyncio.run(go())
    assert first == (False, None)
    assert second == (True, "new")
