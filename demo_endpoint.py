"""
Quick demo script exposing a small remote class.

Starts a local server with a `Locations` class so the REST and socket
transports can be tried with curl or a WebSocket client.
"""

import math

import uvicorn

from remoting.main import create_app
from remoting.services import RemoteObjects, remote_method

EARTH_RADIUS_KM = 6371.0


class Locations:
    """A named location; prototype methods run on the instance built from the URL id."""

    def __init__(self, id):
        self.id = id

    @remote_method(
        accepts=[
            {"name": "here", "type": "geopoint", "required": True},
            {"name": "there", "type": "geopoint", "required": True},
        ],
        returns=[{"name": "km", "type": "number"}],
        http_verb="get",
    )
    @staticmethod
    async def distance(here, there):
        lat1, lat2 = math.radians(here["lat"]), math.radians(there["lat"])
        d_lat = lat2 - lat1
        d_lng = math.radians(there["lng"] - here["lng"])
        a = math.sin(d_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(d_lng / 2) ** 2
        return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(a))

    @remote_method(
        accepts=[{"name": "greeting", "type": "string"}],
        returns=[{"name": "id", "type": "string"}, {"name": "message", "type": "string"}],
    )
    def describe(self, greeting, callback):
        callback(None, self.id, f"{greeting or 'Hello'} from {self.id}")


remotes = RemoteObjects()
remotes.expose(Locations)
app = create_app(remotes)

if __name__ == "__main__":
    print("=" * 60)
    print("Starting Remoting Backend Demo")
    print("=" * 60)
    print()
    print("📌 API Endpoints:")
    print("   - Health Check:  GET  http://localhost:8000/health")
    print("   - Distance:      GET  http://localhost:8000/api/Locations/distance?here=2.5,3&there=3,4")
    print("   - Describe:      GET  http://localhost:8000/api/Locations/home/describe?greeting=Hi")
    print("   - Socket:        ws://localhost:8000/socket")
    print("   - API Docs:           http://localhost:8000/docs")
    print()
    print("📝 Socket frame:")
    print('   {"id": 1, "method": "Locations.distance", "args": {"here": [2.5, 3], "there": "3,4"}}')
    print()
    print("=" * 60)
    print("Starting server on http://localhost:8000")
    print("Press Ctrl+C to stop")
    print("=" * 60)
    print()

    uvicorn.run(
        "demo_endpoint:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )
