"""In-memory transport standing in for the subgraph"""

import re

_ROOT_KEY = re.compile(r"\)\s*\{\s*(\w+)")


class FakeTransport:
    """Records every call and answers by the document's root field

    responses maps a root key (e.g. "pools") to the value placed under it,
    or to an exception instance to raise instead. Unknown roots get [].
    """

    def __init__(self, responses=None):
        self.responses = dict(responses or {})
        self.calls = []

    async def execute(self, query, variables):
        self.calls.append((query, variables))
        root_key = _ROOT_KEY.search(query).group(1)
        response = self.responses.get(root_key, [])
        if isinstance(response, Exception):
            raise response
        return {root_key: response}

    def calls_for(self, root_key):
        return [call for call in self.calls if _ROOT_KEY.search(call[0]).group(1) == root_key]

    @property
    def last_query(self):
        return self.calls[-1][0]

    @property
    def last_variables(self):
        return self.calls[-1][1]
