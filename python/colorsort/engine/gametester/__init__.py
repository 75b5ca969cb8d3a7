from colorsort.engine.gametester.tester import BatchTestResult, LevelTester

__all__ = ["BatchTestResult", "LevelTester"]
