#!/usr/bin/env python3
"""
Example script for exercising the Air Quality Service API endpoints.
Pushes a few readings and prints the resulting commentary and alerts.
"""

import asyncio
import httpx


BASE_URL = "http://localhost:8000"
API_BASE = f"{BASE_URL}/api/v1/air-quality"

READINGS = [
    {"deviceName": "demo-sensor", "time": "2024-05-01 12:00:00", "tempValue": 21.0,
     "humValue": 42.0, "co2Value": 520, "tvocValue": 150, "pressureValue": 1012.0},
    {"deviceName": "demo-sensor", "time": "2024-05-01 12:01:00", "tempValue": 21.4,
     "humValue": 43.0, "co2Value": 610, "tvocValue": 170, "pressureValue": 1012.1},
    {"deviceName": "demo-sensor", "time": "2024-05-01 12:02:00", "tempValue": 22.1,
     "humValue": 45.5, "co2Value": 1150, "tvocValue": 240, "pressureValue": 1012.0},
]


async def test_health(client: httpx.AsyncClient):
    """Test service health check."""
    print("Testing health check...")

    response = await client.get(f"{BASE_URL}/health")
    print(f"Health check status: {response.status_code}")
    if response.status_code == 200:
        data = response.json()
        print(f"Service: {data.get('service')}")
        print(f"Status: {data.get('status')}")
        print(f"InfluxDB: {data.get('influxdb')}")


async def test_ingest(client: httpx.AsyncClient):
    """Push readings and print the commentary after each one."""
    print("\nClearing history...")
    await client.post(f"{API_BASE}/history/clear")

    for reading in READINGS:
        response = await client.post(f"{API_BASE}/measurements", json=reading)
        print(f"\nIngest status: {response.status_code}")
        if response.status_code == 201:
            data = response.json()
            print(f"Summary: {data['prediction']['summary']}")
            print(f"Details: {data['prediction']['details']}")
            for alert in data["alerts"]:
                print(f"Alert: {alert['title']} - {alert['message']}")
        else:
            print(f"Error: {response.text}")


async def test_statistics(client: httpx.AsyncClient):
    """Print window statistics."""
    print("\nTesting window statistics...")

    response = await client.get(f"{API_BASE}/statistics")
    print(f"Statistics status: {response.status_code}")
    if response.status_code == 200:
        for name, stats in response.json()["metrics"].items():
            print(f"  {name}: mean={stats['mean']:.1f} {stats['unit']} "
                  f"min={stats['min']:.1f} max={stats['max']:.1f} sd={stats['std_dev']:.2f}")


async def test_latest(client: httpx.AsyncClient):
    """Fetch once from the data source and print the latest reading."""
    print("\nTesting refresh from data source...")

    response = await client.post(f"{API_BASE}/refresh")
    print(f"Refresh status: {response.status_code}")
    data = response.json()
    if response.status_code == 200:
        print(f"Latest status: {data['status']}")
        if data.get("measurement"):
            print(f"CO2: {data['measurement']['co2']} ppm")
        if data.get("error_message"):
            print(f"Message: {data['error_message']}")
    else:
        print(f"Error: {data}")


async def main():
    """Run all example calls."""
    print("Air Quality Service API Examples")
    print("=" * 40)

    try:
        async with httpx.AsyncClient(timeout=30.0) as client:
            await test_health(client)
            await test_ingest(client)
            await test_statistics(client)
            await test_latest(client)

        print("\n" + "=" * 40)
        print("All examples completed!")

    except httpx.ConnectError:
        print("Could not connect to the service. Make sure it's running on localhost:8000")


if __name__ == "__main__":
    asyncio.run(main())
