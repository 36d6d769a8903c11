import threading

from cucina import deps


def test_get_kitchen_builds_one_kitchen_under_concurrency(monkeypatch, store):
    built = []

    def counting_store():
        built.append(1)
        return store

    monkeypatch.setattr(deps, "_kitchen", None)
    monkeypatch.setattr(deps, "build_store", counting_store)

    barrier = threading.Barrier(8)
    results = []

    def worker():
        barrier.wait()
        results.append(deps.get_kitchen())

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(built) == 1
    assert len({id(k) for k in results}) == 1
