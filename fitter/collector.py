# collector.py — translated messages bucketed by message type

from .profile import MesgNum


class Collector:
    def __init__(self):
        self.sessions = []
        self.laps = []
        self.records = []
        self.sports = []
        self._buckets = {
            MesgNum.SESSION: self.sessions,
            MesgNum.LAP: self.laps,
            MesgNum.RECORD: self.records,
            MesgNum.SPORT: self.sports,
        }

    def wants(self, num):
        return num in self._buckets

    def add(self, num, translated):
        bucket = self._buckets.get(num)
        if bucket is None:
            return False
        bucket.append(translated)
        return True

    def counts(self):
        return {"session": len(self.sessions), "lap": len(self.laps),
                "record": len(self.records), "sport": len(self.sports)}
